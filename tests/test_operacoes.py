from decimal import Decimal

import pytest

from gestor_eletrica.entidades import (Cliente, ErroValidacao, FormaPagamento, ItemMaterial,
                                       ItemServico, Material, RegistroServico, TipoServico)
from gestor_eletrica.operacoes import (excluir_cliente, excluir_material, excluir_servico,
                                       salvar_cliente, salvar_material, salvar_servico,
                                       salvar_tipo_servico)
from gestor_eletrica.relatorios import nome_cliente


def test_salvar_cliente_sem_nome(estado):
    with pytest.raises(ErroValidacao):
        salvar_cliente(estado, Cliente(nome='   '))


def test_salvar_cliente_novo_nao_altera_estado_original(estado):
    novo = salvar_cliente(estado, Cliente(nome='Bruno'))
    assert [c.nome for c in novo.clientes] == ['Ana', 'Bruno']
    assert [c.nome for c in estado.clientes] == ['Ana']


def test_salvar_cliente_existente_atualiza_no_lugar(estado):
    novo = salvar_cliente(estado, Cliente(id='c1', nome='Ana Paula'))
    assert len(novo.clientes) == 1
    assert novo.cliente('c1').nome == 'Ana Paula'


def test_endereco_montado_a_partir_das_partes(estado):
    cliente = Cliente(nome='Carlos', rua='Rua A, 10', bairro='Centro', cidade='Bauru', uf='SP')
    novo = salvar_cliente(estado, cliente)
    assert novo.clientes[-1].endereco == 'Rua A, 10, Centro, Bauru-SP'


def test_endereco_livre_mantido_sem_partes(estado):
    novo = salvar_cliente(estado, Cliente(nome='Carlos', endereco='Sítio Boa Vista'))
    assert novo.clientes[-1].endereco == 'Sítio Boa Vista'


def test_material_e_tipo_exigem_nome(estado):
    with pytest.raises(ErroValidacao):
        salvar_material(estado, Material(nome=''))
    with pytest.raises(ErroValidacao):
        salvar_tipo_servico(estado, TipoServico(nome=''))


def test_servico_sem_cliente(estado):
    with pytest.raises(ErroValidacao):
        salvar_servico(estado, RegistroServico(cliente_id=''))


def test_servico_com_cliente_inexistente(estado):
    with pytest.raises(ErroValidacao):
        salvar_servico(estado, RegistroServico(cliente_id='fantasma'))


def test_salvar_servico_calcula_totais_e_parcelas(estado):
    registro = RegistroServico(
        cliente_id='c1',
        itens_servico=[ItemServico('t1', 1)],
        itens_material=[ItemMaterial('m1', 2)],
        desconto=Decimal('5.00'),
        forma_pagamento=FormaPagamento.PIX,
        parcelas=4,
    )
    novo = salvar_servico(estado, registro)
    salvo = novo.servico(registro.id)
    assert salvo.valor_servico == Decimal('100.00')
    assert salvo.valor_total == Decimal('115.00')
    assert salvo.parcelas == 1


def test_salvar_servico_nao_baixa_estoque(estado):
    registro = RegistroServico(cliente_id='c1', itens_material=[ItemMaterial('m1', 2)])
    novo = salvar_servico(estado, registro)
    assert novo.material('m1').estoque == 3


def test_salvar_servico_cartao_credito_mantem_parcelas(estado):
    registro = RegistroServico(cliente_id='c1', forma_pagamento=FormaPagamento.CARTAO_CREDITO, parcelas=3)
    assert salvar_servico(estado, registro).servico(registro.id).parcelas == 3


def test_excluir_cliente_preserva_servicos(estado):
    registro = RegistroServico(cliente_id='c1', itens_servico=[ItemServico('t1', 1)])
    com_servico = salvar_servico(estado, registro)
    sem_cliente = excluir_cliente(com_servico, 'c1')
    assert sem_cliente.clientes == []
    restante = sem_cliente.servico(registro.id)
    assert restante == com_servico.servico(registro.id)
    assert nome_cliente(sem_cliente, restante.cliente_id) == 'Cliente desconhecido'


def test_excluir_material_e_servico(estado):
    registro = RegistroServico(cliente_id='c1')
    novo = excluir_material(salvar_servico(estado, registro), 'm1')
    assert novo.materiais == []
    assert excluir_servico(novo, registro.id).servicos == []
