"""
Task subsystem.

Components:
- task_models.py: data structures (Task, DerivedTask, Metrics) + record parsing/validation
- task_metrics.py: pure derivation functions (ROI, totals, efficiency, grade)
- task_ranking.py: deterministic ranked ordering
- task_store.py: in-memory store with mutations and one-level undo
- task_loader.py / task_seed.py: bootstrap data (JSON source or synthetic)
"""
