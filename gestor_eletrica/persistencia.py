from datetime import date
import json
import logging

from .entidades import ErroValidacao, EstadoApp
from .models import EstadoSalvo, db

logger = logging.getLogger(__name__)

CHAVE_PADRAO = 'gestor_pro_state'


def carregar_estado(chave=CHAVE_PADRAO) -> EstadoApp:
    registro = EstadoSalvo.query.filter_by(chave=chave).first()
    if not registro:
        return EstadoApp()
    try:
        dados = json.loads(registro.dados or '{}')
    except json.JSONDecodeError:
        logger.error("Estado salvo em '%s' está corrompido; iniciando vazio.", chave)
        return EstadoApp()
    if not isinstance(dados, dict):
        return EstadoApp()
    try:
        return EstadoApp.from_dict(dados)
    except (AttributeError, TypeError):
        logger.error("Estado salvo em '%s' tem itens em formato desconhecido; iniciando vazio.", chave)
        return EstadoApp()


def salvar_estado(estado: EstadoApp, chave=CHAVE_PADRAO):
    registro = EstadoSalvo.query.filter_by(chave=chave).first()
    if not registro:
        registro = EstadoSalvo(chave=chave)
        db.session.add(registro)
    registro.dados = json.dumps(estado.to_dict(), ensure_ascii=False)
    db.session.commit()
    logger.debug("Estado '%s' salvo", chave)


def nome_arquivo_backup(dia=None) -> str:
    dia = dia or date.today()
    return f"backup_rm_eletrica_{dia.isoformat()}.json"


def exportar_backup(estado: EstadoApp, dia=None):
    conteudo = json.dumps(estado.to_dict(), ensure_ascii=False, indent=2)
    return nome_arquivo_backup(dia), conteudo


def importar_backup(texto) -> EstadoApp:
    try:
        dados = json.loads(texto)
    except (TypeError, json.JSONDecodeError):
        raise ErroValidacao('Arquivo de backup inválido.')
    if not isinstance(dados, dict):
        raise ErroValidacao('Arquivo de backup inválido.')
    try:
        return EstadoApp.from_dict(dados)
    except (AttributeError, TypeError):
        raise ErroValidacao('Arquivo de backup com formato desconhecido.')
