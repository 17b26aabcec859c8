import json
import logging

import requests

logger = logging.getLogger(__name__)

GEMINI_URL = 'https://generativelanguage.googleapis.com/v1beta/models/{modelo}:generateContent'

MSG_SEM_CHAVE = ("A análise de IA requer uma chave de API configurada. "
                 "Entre em contato com o suporte.")
MSG_FALHA = ("Não foi possível gerar a análise no momento. Verifique sua conexão "
             "ou as permissões da sua chave de API.")


def montar_prompt(estado):
    dados = estado.to_dict()
    materiais = json.dumps(dados['materials'], ensure_ascii=False)
    servicos = json.dumps(dados['services'], ensure_ascii=False)
    return f"""
Como um consultor financeiro de negócios, analise os seguintes dados de uma empresa de prestação de serviços elétricos:

Materiais em estoque: {materiais}
Serviços realizados: {servicos}

Por favor, forneça um resumo executivo que inclua:
1. Faturamento Total.
2. Lucro Bruto estimado (considerando Valor Venda - Valor Compra dos materiais + Mão de obra).
3. Margem de lucro média do negócio.
4. Sugestões práticas de melhoria (ex: materiais com baixa margem, clientes recorrentes, sugestões de preços).

Responda em Português com um tom profissional, direto e encorajador para o empresário.
"""


def gerar_analise(estado, api_key, modelo='gemini-2.0-flash', timeout=60):
    """Devolve o texto da análise ou uma mensagem fixa de erro; nunca levanta."""
    if not api_key:
        logger.error("Configuração de IA: GEMINI_API_KEY não encontrada no ambiente.")
        return MSG_SEM_CHAVE

    corpo = {'contents': [{'parts': [{'text': montar_prompt(estado)}]}]}
    try:
        response = requests.post(
            GEMINI_URL.format(modelo=modelo),
            params={'key': api_key},
            json=corpo,
            timeout=timeout,
        )
        response.raise_for_status()
        dados = response.json()
        partes = dados['candidates'][0]['content']['parts']
        texto = ''.join(p.get('text', '') for p in partes).strip()
    except (requests.exceptions.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
        logger.error("Erro na análise da IA: %s", e)
        return MSG_FALHA

    return texto or MSG_FALHA
