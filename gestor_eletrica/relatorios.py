import calendar
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from .entidades import EstadoApp, Material, RegistroServico, StatusServico

CLIENTE_DESCONHECIDO = 'Cliente desconhecido'

NOMES_MESES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]

CLASSES_STATUS = {
    StatusServico.CONCLUIDO: 'status-concluido',
    StatusServico.EM_ANDAMENTO: 'status-andamento',
    StatusServico.AGUARDANDO_APROVACAO: 'status-aguardando',
}


def nome_cliente(estado: EstadoApp, cliente_id: str) -> str:
    cliente = estado.cliente(cliente_id)
    return cliente.nome if cliente else CLIENTE_DESCONHECIDO


def faturamento_total(estado: EstadoApp) -> Decimal:
    return sum((s.valor_total for s in estado.servicos), Decimal('0'))


def estoque_baixo(estado: EstadoApp, limite: int = 10) -> List[Material]:
    return [m for m in estado.materiais if m.estoque < limite]


def estoque_critico(estado: EstadoApp, limite: int = 5) -> List[Material]:
    return estoque_baixo(estado, limite)


def alertas_estoque(estado: EstadoApp, limite: int = 10, critico: int = 5, quantidade: int = 5):
    baixos = sorted(estoque_baixo(estado, limite), key=lambda m: m.estoque)[:quantidade]
    return [{'material': m, 'critico': m.estoque < critico} for m in baixos]


def servicos_recentes(estado: EstadoApp, quantidade: int = 5) -> List[RegistroServico]:
    if quantidade <= 0:
        return []
    return list(reversed(estado.servicos[-quantidade:]))


def servicos_na_data(estado: EstadoApp, data) -> List[RegistroServico]:
    if isinstance(data, date):
        data = data.isoformat()
    return [s for s in estado.servicos if s.data == data]


def resumo_painel(estado: EstadoApp, limite_baixo: int = 10, limite_critico: int = 5,
                  quantidade_recentes: int = 5) -> dict:
    recentes = [
        {'servico': s, 'cliente': nome_cliente(estado, s.cliente_id)}
        for s in servicos_recentes(estado, quantidade_recentes)
    ]
    return {
        'faturamento': faturamento_total(estado),
        'total_servicos': len(estado.servicos),
        'total_clientes': len(estado.clientes),
        'total_materiais': len(estado.materiais),
        'qtd_estoque_baixo': len(estoque_baixo(estado, limite_baixo)),
        'qtd_estoque_critico': len(estoque_critico(estado, limite_critico)),
        'recentes': recentes,
        'alertas': alertas_estoque(estado, limite_baixo, limite_critico),
    }


@dataclass
class DiaCalendario:
    dia: int
    data: str
    hoje: bool = False
    servicos: List[dict] = field(default_factory=list)


@dataclass
class MesCalendario:
    ano: int
    mes: int
    semanas: List[List[Optional[DiaCalendario]]]

    @property
    def titulo(self) -> str:
        return f"{NOMES_MESES[self.mes - 1]} {self.ano}"

    @property
    def anterior(self):
        return (self.ano - 1, 12) if self.mes == 1 else (self.ano, self.mes - 1)

    @property
    def proximo(self):
        return (self.ano + 1, 1) if self.mes == 12 else (self.ano, self.mes + 1)


def montar_calendario(estado: EstadoApp, ano: int, mes: int, hoje: Optional[date] = None) -> MesCalendario:
    """Grade do mês começando no domingo; dias fora do mês ficam como None."""
    hoje = hoje or date.today()
    grade = calendar.Calendar(firstweekday=calendar.SUNDAY)
    semanas = []
    for semana in grade.monthdayscalendar(ano, mes):
        linha = []
        for dia in semana:
            if dia == 0:
                linha.append(None)
                continue
            atual = date(ano, mes, dia)
            linha.append(DiaCalendario(
                dia=dia,
                data=atual.isoformat(),
                hoje=atual == hoje,
                servicos=[
                    {
                        'servico': s,
                        'cliente': nome_cliente(estado, s.cliente_id),
                        'classe': CLASSES_STATUS[s.status],
                    }
                    for s in servicos_na_data(estado, atual)
                ],
            ))
        semanas.append(linha)
    return MesCalendario(ano=ano, mes=mes, semanas=semanas)
