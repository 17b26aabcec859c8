"""Comandos sobre o estado: cada função recebe um EstadoApp e devolve outro.

A coleção afetada é sempre substituída por inteiro; o estado recebido não
é alterado.
"""
from dataclasses import replace
import logging

from .calculos import aplicar_totais, normalizar_parcelas
from .entidades import Cliente, ErroValidacao, EstadoApp, Material, RegistroServico, TipoServico
from .formatacao import hoje_iso

logger = logging.getLogger(__name__)


def _upsert(colecao, entidade):
    if any(e.id == entidade.id for e in colecao):
        return [entidade if e.id == entidade.id else e for e in colecao]
    return [*colecao, entidade]


def _sem(colecao, entidade_id):
    return [e for e in colecao if e.id != entidade_id]


def salvar_cliente(estado: EstadoApp, cliente: Cliente) -> EstadoApp:
    cliente.validate()
    cliente = replace(cliente, nome=cliente.nome.strip())
    if any((cliente.rua, cliente.bairro, cliente.cidade, cliente.uf)):
        cliente = replace(cliente, endereco=cliente.montar_endereco())
    logger.info("Cliente salvo: %s", cliente.id)
    return replace(estado, clientes=_upsert(estado.clientes, cliente))


def excluir_cliente(estado: EstadoApp, cliente_id: str) -> EstadoApp:
    # registros de serviço mantêm a referência; a exibição usa um rótulo padrão
    return replace(estado, clientes=_sem(estado.clientes, cliente_id))


def salvar_material(estado: EstadoApp, material: Material) -> EstadoApp:
    material.validate()
    material = replace(material, nome=material.nome.strip())
    logger.info("Material salvo: %s", material.id)
    return replace(estado, materiais=_upsert(estado.materiais, material))


def excluir_material(estado: EstadoApp, material_id: str) -> EstadoApp:
    return replace(estado, materiais=_sem(estado.materiais, material_id))


def salvar_tipo_servico(estado: EstadoApp, tipo: TipoServico) -> EstadoApp:
    tipo.validate()
    tipo = replace(tipo, nome=tipo.nome.strip())
    logger.info("Tipo de serviço salvo: %s", tipo.id)
    return replace(estado, tipos_servico=_upsert(estado.tipos_servico, tipo))


def excluir_tipo_servico(estado: EstadoApp, tipo_id: str) -> EstadoApp:
    return replace(estado, tipos_servico=_sem(estado.tipos_servico, tipo_id))


def preparar_servico(estado: EstadoApp, registro: RegistroServico) -> RegistroServico:
    """Normaliza parcelas e data e recalcula os totais, sem validar."""
    registro = replace(
        registro,
        parcelas=normalizar_parcelas(registro.forma_pagamento, registro.parcelas),
        data=registro.data or hoje_iso(),
    )
    return aplicar_totais(registro, estado)


def salvar_servico(estado: EstadoApp, registro: RegistroServico) -> EstadoApp:
    registro.validate()
    if estado.cliente(registro.cliente_id) is None:
        raise ErroValidacao('Cliente selecionado não existe mais.')
    registro = preparar_servico(estado, registro)
    logger.info("Serviço salvo: %s (total %s)", registro.id, registro.valor_total)
    return replace(estado, servicos=_upsert(estado.servicos, registro))


def excluir_servico(estado: EstadoApp, servico_id: str) -> EstadoApp:
    return replace(estado, servicos=_sem(estado.servicos, servico_id))
