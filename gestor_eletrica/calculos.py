from dataclasses import dataclass, replace
from decimal import Decimal
from typing import List

from .entidades import (EstadoApp, FormaPagamento, ItemMaterial, ItemServico,
                        ModoMaoDeObra, RegistroServico)

ZERO = Decimal('0')


@dataclass(frozen=True)
class Totais:
    mao_de_obra: Decimal
    materiais: Decimal
    desconto: Decimal
    total: Decimal


def subtotal_servicos(itens: List[ItemServico], estado: EstadoApp) -> Decimal:
    total = ZERO
    for item in itens:
        tipo = estado.tipo_servico(item.tipo_servico_id)
        # tipo excluído do catálogo não contribui
        if tipo:
            total += tipo.valor_base * item.quantidade
    return total


def subtotal_materiais(itens: List[ItemMaterial], estado: EstadoApp) -> Decimal:
    total = ZERO
    for item in itens:
        material = estado.material(item.material_id)
        if material:
            total += material.preco_venda * item.quantidade
    return total


def subtotal_mao_de_obra(registro: RegistroServico, estado: EstadoApp) -> Decimal:
    if registro.modo_mao_de_obra is ModoMaoDeObra.VALOR_FIXO:
        return registro.valor_servico
    return subtotal_servicos(registro.itens_servico, estado)


def calcular_totais(registro: RegistroServico, estado: EstadoApp) -> Totais:
    """
    Totais do registro a partir dos itens atuais do formulário.
    total = max(0, mão de obra + materiais - desconto); o desconto excedente
    é absorvido, nunca gera total negativo.
    """
    mao_de_obra = subtotal_mao_de_obra(registro, estado)
    materiais = subtotal_materiais(registro.itens_material, estado)
    total = mao_de_obra + materiais - registro.desconto
    return Totais(
        mao_de_obra=mao_de_obra,
        materiais=materiais,
        desconto=registro.desconto,
        total=max(total, ZERO),
    )


def aplicar_totais(registro: RegistroServico, estado: EstadoApp) -> RegistroServico:
    totais = calcular_totais(registro, estado)
    return replace(registro, valor_servico=totais.mao_de_obra, valor_total=totais.total)


def normalizar_parcelas(forma: FormaPagamento, parcelas) -> int:
    if forma is FormaPagamento.CARTAO_CREDITO:
        return max(1, int(parcelas or 1))
    return 1


def adicionar_item(itens, novo):
    """Soma a quantidade quando a referência já está na lista."""
    resultado = []
    somado = False
    for item in itens:
        if item.ref_id == novo.ref_id:
            item = replace(item, quantidade=item.quantidade + novo.quantidade)
            somado = True
        resultado.append(item)
    if not somado:
        resultado.append(novo)
    return resultado


def remover_item(itens, ref_id: str):
    return [i for i in itens if i.ref_id != ref_id]
