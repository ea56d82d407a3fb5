"""
v4 API routers.

Modules:
- health: liveness and version endpoints
- admin: administrative project range export
- metadata: forms, plan configs and price configs
- projects: project CRUD and search
- project_members: project membership
- project_member_invites: project invites
"""
