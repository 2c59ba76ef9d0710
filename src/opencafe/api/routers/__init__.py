# Routers are mounted by `opencafe.api.app.create_app`.
