"""Recibo / nota de serviço: modelo de exibição, texto para WhatsApp e PDF."""
from io import BytesIO
import logging
import re
from urllib.parse import quote

from xhtml2pdf import pisa

from .entidades import ErroValidacao, FormaPagamento
from .formatacao import data_br, moeda, somente_digitos

logger = logging.getLogger(__name__)

DESCRICAO_PADRAO = 'Atendimento técnico realizado.'


class ErroDocumento(Exception):
    """Falha ao gerar o PDF do recibo."""


def _linhas_servicos(registro, estado):
    linhas = []
    for item in registro.itens_servico:
        tipo = estado.tipo_servico(item.tipo_servico_id)
        unitario = tipo.valor_base if tipo else 0
        linhas.append({
            'nome': tipo.nome if tipo else 'Serviço',
            'quantidade': item.quantidade,
            'unitario': unitario,
            'subtotal': unitario * item.quantidade,
        })
    return linhas


def _linhas_mao_de_obra(registro, estado):
    linhas = _linhas_servicos(registro, estado)
    # mão de obra digitada vira uma linha única com o valor salvo
    if not linhas and registro.valor_servico > 0:
        linhas = [{
            'nome': 'Mão de obra',
            'quantidade': 1,
            'unitario': registro.valor_servico,
            'subtotal': registro.valor_servico,
        }]
    return linhas


def _linhas_materiais(registro, estado):
    linhas = []
    for item in registro.itens_material:
        material = estado.material(item.material_id)
        unitario = material.preco_venda if material else 0
        linhas.append({
            'nome': material.nome if material else 'Material',
            'quantidade': item.quantidade,
            'unitario': unitario,
            'subtotal': unitario * item.quantidade,
        })
    return linhas


def texto_pagamento(registro):
    texto = registro.forma_pagamento.value
    if registro.forma_pagamento is FormaPagamento.CARTAO_CREDITO:
        sufixo = 'parcela' if registro.parcelas == 1 else 'parcelas'
        texto += f" ({registro.parcelas} {sufixo})"
    return texto


def montar_recibo(registro, estado, empresa):
    """Dados já resolvidos para o template do recibo; o layout fica no template."""
    cliente = estado.cliente(registro.cliente_id)
    return {
        'empresa': empresa,
        'numero': registro.numero,
        'data': data_br(registro.data),
        'cliente': {
            'nome': cliente.nome if cliente else 'Cliente desconhecido',
            'telefone': cliente.telefone if cliente else '',
            'rua': (cliente.rua or cliente.endereco) if cliente else '',
            'bairro': cliente.bairro if cliente else '',
            'cidade': cliente.cidade if cliente else '',
            'uf': cliente.uf if cliente else '',
            'cep': cliente.cep if cliente else '',
        },
        'descricao': registro.descricao or DESCRICAO_PADRAO,
        'status': registro.status.value,
        'pagamento': texto_pagamento(registro),
        'servicos': _linhas_mao_de_obra(registro, estado),
        'materiais': _linhas_materiais(registro, estado),
        # valores gravados no registro, não recalculados pelo catálogo atual
        'desconto': registro.desconto if registro.desconto > 0 else None,
        'total': registro.valor_total,
    }


def texto_compartilhamento(registro, estado, empresa_nome):
    cliente = estado.cliente(registro.cliente_id)
    servicos = '\n'.join(
        f"• {l['quantidade']}x {l['nome']} - {moeda(l['subtotal'])}"
        for l in _linhas_mao_de_obra(registro, estado)
    )
    materiais = '\n'.join(
        f"• {l['quantidade']}x {l['nome']} - {moeda(l['subtotal'])}"
        for l in _linhas_materiais(registro, estado)
    )
    return '\n'.join([
        f"*{empresa_nome}*",
        f"*NOTA DE SERVIÇO #{registro.numero}*",
        f"Cliente: {cliente.nome if cliente else 'Cliente desconhecido'}",
        f"Data: {data_br(registro.data)}",
        f"Serviços:\n{servicos}" if servicos else "Serviços:",
        f"Materiais:\n{materiais}" if materiais else "Materiais:",
        f"Total: {moeda(registro.valor_total)}",
        f"Pagamento: {texto_pagamento(registro)}",
    ])


def link_whatsapp(registro, estado, empresa_nome):
    cliente = estado.cliente(registro.cliente_id)
    telefone = somente_digitos(cliente.telefone if cliente else '')
    if not telefone:
        raise ErroValidacao('Este cliente não possui telefone cadastrado.')
    texto = texto_compartilhamento(registro, estado, empresa_nome)
    return f"https://wa.me/55{telefone}?text={quote(texto)}"


def nome_arquivo_pdf(registro, estado):
    cliente = estado.cliente(registro.cliente_id)
    nome = re.sub(r'[^a-z0-9]', '_', cliente.nome if cliente else 'Cliente', flags=re.IGNORECASE)
    return f"RM_Recibo_{registro.numero}_{nome}.pdf"


def gerar_pdf(html: str) -> bytes:
    result = BytesIO()
    try:
        pisa_status = pisa.CreatePDF(html, dest=result)
    except Exception as e:
        logger.error("Erro ao gerar PDF: %s", e)
        raise ErroDocumento('Não foi possível gerar o PDF do recibo.') from e

    if pisa_status.err:
        logger.error("xhtml2pdf retornou %s erro(s)", pisa_status.err)
        raise ErroDocumento('Não foi possível gerar o PDF do recibo.')
    return result.getvalue()
