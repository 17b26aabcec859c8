from datetime import datetime
import logging

from flask import Flask

from .config import Config
from .formatacao import data_br, moeda
from .models import db


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    db.init_app(app)

    from .rotas import gestor_bp
    app.register_blueprint(gestor_bp)

    app.add_template_filter(moeda, 'moeda')
    app.add_template_filter(data_br, 'data_br')

    @app.context_processor
    def inject_empresa():
        return {
            'datetime': datetime,
            'empresa_nome': app.config['EMPRESA_NOME'],
        }

    with app.app_context():
        db.create_all()

    return app
