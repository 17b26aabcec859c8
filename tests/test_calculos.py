from dataclasses import replace
from decimal import Decimal

from gestor_eletrica.calculos import (adicionar_item, aplicar_totais, calcular_totais,
                                      normalizar_parcelas, remover_item)
from gestor_eletrica.entidades import (FormaPagamento, ItemMaterial, ItemServico, ModoMaoDeObra,
                                       RegistroServico)


def _registro(desconto='5.00'):
    return RegistroServico(
        cliente_id='c1',
        itens_servico=[ItemServico('t1', 1)],
        itens_material=[ItemMaterial('m1', 2)],
        desconto=Decimal(desconto),
    )


def test_totais_exemplo(estado):
    totais = calcular_totais(_registro(), estado)
    assert totais.mao_de_obra == Decimal('100.00')
    assert totais.materiais == Decimal('20.00')
    assert totais.total == Decimal('115.00')


def test_desconto_maior_que_subtotal_zera_total(estado):
    totais = calcular_totais(_registro('500.00'), estado)
    assert totais.total == 0


def test_aplicar_totais_guarda_so_mao_de_obra_em_valor_servico(estado):
    registro = aplicar_totais(_registro(), estado)
    assert registro.valor_servico == Decimal('100.00')
    assert registro.valor_total == Decimal('115.00')
    assert registro.valor_total == max(Decimal('0'), registro.valor_servico + Decimal('20.00') - registro.desconto)


def test_referencias_removidas_nao_contribuem(estado):
    registro = RegistroServico(
        cliente_id='c1',
        itens_servico=[ItemServico('t1', 1), ItemServico('sumiu', 3)],
        itens_material=[ItemMaterial('tambem-sumiu', 4)],
    )
    totais = calcular_totais(registro, estado)
    assert totais.mao_de_obra == Decimal('100.00')
    assert totais.materiais == 0


def test_listas_vazias(estado):
    totais = calcular_totais(RegistroServico(cliente_id='c1'), estado)
    assert totais.total == 0


def test_mao_de_obra_valor_fixo_ignora_itens(estado):
    registro = replace(_registro(), modo_mao_de_obra=ModoMaoDeObra.VALOR_FIXO,
                       valor_servico=Decimal('80.00'))
    totais = calcular_totais(registro, estado)
    assert totais.mao_de_obra == Decimal('80.00')
    assert totais.total == Decimal('95.00')


def test_desconto_negativo_aumenta_total(estado):
    totais = calcular_totais(_registro('-10'), estado)
    assert totais.total == Decimal('130.00')


def test_adicionar_item_repetido_soma_quantidade():
    itens = adicionar_item([], ItemMaterial('m1', 2))
    itens = adicionar_item(itens, ItemMaterial('m2', 1))
    itens = adicionar_item(itens, ItemMaterial('m1', 3))
    assert itens == [ItemMaterial('m1', 5), ItemMaterial('m2', 1)]


def test_adicionar_item_nao_altera_lista_original():
    original = [ItemServico('t1', 1)]
    adicionar_item(original, ItemServico('t1', 1))
    assert original == [ItemServico('t1', 1)]


def test_remover_item():
    itens = [ItemServico('t1', 1), ItemServico('t2', 2)]
    assert remover_item(itens, 't1') == [ItemServico('t2', 2)]


def test_parcelas_so_no_cartao_de_credito():
    assert normalizar_parcelas(FormaPagamento.CARTAO_CREDITO, 3) == 3
    assert normalizar_parcelas(FormaPagamento.CARTAO_CREDITO, 0) == 1
    for forma in (FormaPagamento.PIX, FormaPagamento.CARTAO_DEBITO, FormaPagamento.DINHEIRO):
        assert normalizar_parcelas(forma, 6) == 1
