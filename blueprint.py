from index import main_bp
from routes.actions import action_bp
from routes.inventory import inventory_bp


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(action_bp)
    app.register_blueprint(inventory_bp)
