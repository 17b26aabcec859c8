from datetime import date, datetime
from decimal import Decimal, InvalidOperation
import re

CENTAVOS = Decimal('0.01')
# teto para valores digitados; acima disso a entrada é descartada
LIMITE_VALOR = Decimal('1000000000000')


def para_decimal(valor, default='0'):
    """Converte entrada de formulário em Decimal; aceita vírgula decimal."""
    if isinstance(valor, Decimal):
        return valor
    try:
        numero = Decimal(str(valor).strip().replace(',', '.'))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(default)
    if not numero.is_finite() or abs(numero) >= LIMITE_VALOR:
        return Decimal(default)
    return numero


def para_inteiro(valor, default=0):
    try:
        numero = int(str(valor).strip())
    except (TypeError, ValueError):
        try:
            return int(para_decimal(valor, str(default)))
        except (InvalidOperation, ValueError, OverflowError):
            return default
    return numero if abs(numero) < LIMITE_VALOR else default


def somente_digitos(texto):
    return re.sub(r'\D+', '', texto or '')


def moeda(valor):
    valor = para_decimal(valor).quantize(CENTAVOS)
    return f"R$ {valor:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def data_br(valor):
    """'2026-03-05' -> '05/03/2026'. Devolve a entrada quando não for data ISO."""
    if isinstance(valor, (date, datetime)):
        return valor.strftime('%d/%m/%Y')
    try:
        return datetime.strptime(valor, '%Y-%m-%d').strftime('%d/%m/%Y')
    except (TypeError, ValueError):
        return valor or ''


def hoje_iso():
    return date.today().isoformat()


def nao_negativo(valor):
    return valor if valor > 0 else Decimal('0')
