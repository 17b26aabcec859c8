from decimal import Decimal

from gestor_eletrica.formatacao import data_br, moeda, para_decimal, para_inteiro


def test_para_decimal_aceita_virgula():
    assert para_decimal('2,10') == Decimal('2.10')
    assert para_decimal('abc') == 0
    assert para_decimal(None, '1') == 1


def test_valores_fora_da_faixa_sao_descartados():
    assert para_decimal('nan') == 0
    assert para_decimal('1e30') == 0
    assert para_inteiro('1e30') == 0
    assert para_inteiro('99999999999999', 1) == 1


def test_moeda():
    assert moeda('1234.5') == 'R$ 1.234,50'
    assert moeda(Decimal('0')) == 'R$ 0,00'


def test_data_br():
    assert data_br('2026-03-05') == '05/03/2026'
    assert data_br('ontem') == 'ontem'
