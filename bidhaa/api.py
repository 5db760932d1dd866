from bidhaa.routes import (
    auth_bp,
    user_bp,
    admin_bp,
    catalog_bp,
    search_bp,
    checkout_bp,
)


def register_api(app):
    """Register the storefront and back-office blueprints."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(search_bp)
    app.register_blueprint(checkout_bp)
