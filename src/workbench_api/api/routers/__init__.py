"""
workbench_api.api.routers

HTTP routers; each module exposes a `router` mounted by `api.app.create_app`.
"""
