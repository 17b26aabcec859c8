# consultas externas: CEP (ViaCEP) e localidades (IBGE)
# Somente leitura, sem nova tentativa; em falha devolve None / [] e o
# formulário continua como estava.

from dataclasses import dataclass
import logging

import requests

from .formatacao import somente_digitos

logger = logging.getLogger(__name__)

VIACEP_URL = 'https://viacep.com.br/ws/{cep}/json/'
IBGE_ESTADOS_URL = 'https://servicodados.ibge.gov.br/api/v1/localidades/estados?orderBy=nome'
IBGE_CIDADES_URL = 'https://servicodados.ibge.gov.br/api/v1/localidades/estados/{uf}/municipios?orderBy=nome'

TIMEOUT_PADRAO = 8

# ---------- cache simples em memória (só respostas válidas) ----------
_CACHE_CEP = {}
_CACHE_ESTADOS = []
_CACHE_CIDADES = {}


@dataclass(frozen=True)
class Endereco:
    cep: str
    rua: str
    bairro: str
    cidade: str
    uf: str

    def to_dict(self):
        return {
            'cep': self.cep,
            'street': self.rua,
            'neighborhood': self.bairro,
            'city': self.cidade,
            'state': self.uf,
        }


def limpar_cache():
    _CACHE_CEP.clear()
    _CACHE_ESTADOS.clear()
    _CACHE_CIDADES.clear()


def _get_json(url, timeout):
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.json()


def buscar_cep(cep, timeout=TIMEOUT_PADRAO):
    cep_limpo = somente_digitos(cep)
    if len(cep_limpo) != 8:
        return None
    if cep_limpo in _CACHE_CEP:
        return _CACHE_CEP[cep_limpo]

    try:
        dados = _get_json(VIACEP_URL.format(cep=cep_limpo), timeout)
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error("Erro ao consultar ViaCEP (%s): %s", cep_limpo, e)
        return None

    if not isinstance(dados, dict) or dados.get('erro'):
        logger.info("CEP não encontrado: %s", cep_limpo)
        return None

    endereco = Endereco(
        cep=f"{cep_limpo[:5]}-{cep_limpo[5:]}",
        rua=dados.get('logradouro') or '',
        bairro=dados.get('bairro') or '',
        cidade=dados.get('localidade') or '',
        uf=dados.get('uf') or '',
    )
    _CACHE_CEP[cep_limpo] = endereco
    return endereco


def listar_estados(timeout=TIMEOUT_PADRAO):
    """[(sigla, nome), ...] em ordem alfabética de nome."""
    if _CACHE_ESTADOS:
        return list(_CACHE_ESTADOS)
    try:
        dados = _get_json(IBGE_ESTADOS_URL, timeout)
        estados = [(e['sigla'], e['nome']) for e in dados]
    except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as e:
        logger.error("Erro ao consultar estados no IBGE: %s", e)
        return []
    estados.sort(key=lambda e: e[1])
    _CACHE_ESTADOS.extend(estados)
    return list(estados)


def listar_cidades(uf, timeout=TIMEOUT_PADRAO):
    uf = (uf or '').strip().upper()
    if len(uf) != 2:
        return []
    if uf in _CACHE_CIDADES:
        return list(_CACHE_CIDADES[uf])
    try:
        dados = _get_json(IBGE_CIDADES_URL.format(uf=uf), timeout)
        cidades = [c['nome'] for c in dados]
    except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as e:
        logger.error("Erro ao consultar cidades de %s no IBGE: %s", uf, e)
        return []
    cidades.sort()
    _CACHE_CIDADES[uf] = cidades
    return list(cidades)
