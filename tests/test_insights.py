import requests

from gestor_eletrica import insights
from gestor_eletrica.insights import MSG_FALHA, MSG_SEM_CHAVE, gerar_analise, montar_prompt


class Resposta:
    def __init__(self, dados):
        self.dados = dados

    def raise_for_status(self):
        pass

    def json(self):
        return self.dados


def test_sem_chave(estado):
    assert gerar_analise(estado, '') == MSG_SEM_CHAVE


def test_prompt_inclui_materiais(estado):
    assert 'Disjuntor 20A' in montar_prompt(estado)


def test_resposta_ok(monkeypatch, estado):
    def fake_post(url, params, json, timeout):
        assert params == {'key': 'abc'}
        return Resposta({'candidates': [{'content': {'parts': [{'text': 'Faturamento: R$ 0,00'}]}}]})

    monkeypatch.setattr(insights.requests, 'post', fake_post)
    assert gerar_analise(estado, 'abc') == 'Faturamento: R$ 0,00'


def test_falha_de_rede(monkeypatch, estado):
    def quebra(*args, **kwargs):
        raise requests.exceptions.Timeout('lento')

    monkeypatch.setattr(insights.requests, 'post', quebra)
    assert gerar_analise(estado, 'abc') == MSG_FALHA


def test_resposta_inesperada(monkeypatch, estado):
    monkeypatch.setattr(insights.requests, 'post', lambda *a, **k: Resposta({'candidates': []}))
    assert gerar_analise(estado, 'abc') == MSG_FALHA
