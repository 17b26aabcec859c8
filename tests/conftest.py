from decimal import Decimal

import pytest

from gestor_eletrica import create_app
from gestor_eletrica.config import Config
from gestor_eletrica.entidades import Cliente, EstadoApp, Material, TipoServico
from gestor_eletrica.persistencia import carregar_estado, salvar_estado


class ConfigTeste(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'teste'
    CHAVE_ESTADO = 'estado_teste'
    GEMINI_API_KEY = ''


@pytest.fixture
def app():
    app = create_app(ConfigTeste)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def estado():
    """Ana, um material a R$ 10,00 (estoque 3) e um serviço de R$ 100,00."""
    return EstadoApp(
        clientes=[Cliente(id='c1', nome='Ana', telefone='(14) 99999-0000')],
        materiais=[Material(id='m1', nome='Disjuntor 20A', preco_compra=Decimal('6.00'),
                            preco_venda=Decimal('10.00'), estoque=3)],
        tipos_servico=[TipoServico(id='t1', nome='Instalação de tomada', valor_base=Decimal('100.00'))],
    )


@pytest.fixture
def gravar(app):
    def _gravar(estado):
        with app.app_context():
            salvar_estado(estado, app.config['CHAVE_ESTADO'])
    return _gravar


@pytest.fixture
def ler(app):
    def _ler():
        with app.app_context():
            return carregar_estado(app.config['CHAVE_ESTADO'])
    return _ler
