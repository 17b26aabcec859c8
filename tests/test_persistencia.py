from datetime import date
import json

import pytest

from gestor_eletrica.entidades import (ErroValidacao, EstadoApp, FormaPagamento, ModoMaoDeObra,
                                       StatusServico)
from gestor_eletrica.models import EstadoSalvo, db
from gestor_eletrica.persistencia import (carregar_estado, exportar_backup, importar_backup,
                                          salvar_estado)


def test_estado_vazio_quando_nada_salvo(app):
    with app.app_context():
        estado = carregar_estado('inexistente')
    assert estado == EstadoApp()


def test_chaves_ausentes_viram_listas_vazias(app):
    with app.app_context():
        db.session.add(EstadoSalvo(chave='parcial', dados=json.dumps({'customers': [{'id': '1', 'name': 'Ana'}]})))
        db.session.commit()
        estado = carregar_estado('parcial')
    assert [c.nome for c in estado.clientes] == ['Ana']
    assert estado.materiais == []
    assert estado.tipos_servico == []
    assert estado.servicos == []


def test_salvar_e_carregar(app, estado):
    with app.app_context():
        salvar_estado(estado, 'k')
        salvar_estado(estado, 'k')
        assert EstadoSalvo.query.filter_by(chave='k').count() == 1
        carregado = carregar_estado('k')
    assert carregado == estado


def test_estado_corrompido_inicia_vazio(app):
    with app.app_context():
        db.session.add(EstadoSalvo(chave='ruim', dados='{nao e json'))
        db.session.commit()
        assert carregar_estado('ruim') == EstadoApp()


def test_backup_nome_com_data(estado):
    nome, conteudo = exportar_backup(estado, dia=date(2026, 10, 19))
    assert nome == 'backup_rm_eletrica_2026-10-19.json'
    dados = json.loads(conteudo)
    assert set(dados) == {'customers', 'materials', 'serviceTypes', 'services'}
    assert dados['materials'][0]['sellingPrice'] == 10.0


def test_importar_backup_formato_original():
    texto = json.dumps({
        'customers': [{'id': '1700000000000', 'name': 'Ana', 'phone': '', 'address': 'Rua X'}],
        'services': [{
            'id': '1700000000001', 'customerId': '1700000000000', 'description': '',
            'date': '2026-10-01', 'materials': [], 'paymentMethod': 'Cartão de Crédito',
            'installments': 2, 'status': 'Em Andamento', 'serviceValue': 150,
            'discount': 0, 'totalValue': 150,
        }],
    })
    estado = importar_backup(texto)
    servico = estado.servicos[0]
    assert servico.modo_mao_de_obra is ModoMaoDeObra.VALOR_FIXO
    assert servico.forma_pagamento is FormaPagamento.CARTAO_CREDITO
    assert servico.status is StatusServico.EM_ANDAMENTO
    assert servico.parcelas == 2
    assert estado.materiais == []


@pytest.mark.parametrize('texto', ['[]', 'nada', '{"customers": ["x"]}'])
def test_importar_backup_invalido(texto):
    with pytest.raises(ErroValidacao):
        importar_backup(texto)


def test_estado_com_item_invalido_inicia_vazio(app):
    with app.app_context():
        db.session.add(EstadoSalvo(chave='itens', dados=json.dumps({'customers': ['x']})))
        db.session.commit()
        assert carregar_estado('itens') == EstadoApp()
