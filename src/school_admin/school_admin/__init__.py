"""School Admin package.

Organized by feature modules (leaves, reports, users, sync) with a thin Flask
controller layer over service/repository layers. Leave data is routed through
a sync orchestrator that falls back from MySQL to MongoDB to in-memory data.
"""
