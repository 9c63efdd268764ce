"""
Application Layer for the Vitality workout API.

This package contains:
- ports/: Abstract repository interfaces (what the domain needs)
- use_cases/: Reconcile-and-save, reorder and read workflows
- services/: Stateful editor sessions coordinating the form store and saves
- exceptions: Errors shared with the infrastructure layer
"""
