"""NeuroWork workforce and task-management backend."""
