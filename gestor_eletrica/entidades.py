"""Entidades do gestor: clientes, materiais, catálogo de serviços e registros.

Os nomes dos campos em JSON seguem o formato do backup original
(camelCase), para que arquivos exportados continuem intercambiáveis.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from .formatacao import hoje_iso, para_decimal, para_inteiro


class ErroValidacao(ValueError):
    """Campo obrigatório ausente ou inválido; a operação é abortada."""


def novo_id() -> str:
    return uuid4().hex


def _dinheiro(valor: Decimal) -> float:
    return float(valor)


class FormaPagamento(Enum):
    PIX = 'PIX'
    CARTAO_CREDITO = 'Cartão de Crédito'
    CARTAO_DEBITO = 'Cartão de Débito'
    DINHEIRO = 'Dinheiro'

    @classmethod
    def de_texto(cls, valor, padrao=None):
        try:
            return cls(valor)
        except ValueError:
            return padrao or cls.PIX


class StatusServico(Enum):
    AGUARDANDO_APROVACAO = 'Aguardando Aprovação'
    EM_ANDAMENTO = 'Em Andamento'
    CONCLUIDO = 'Concluído'

    @classmethod
    def de_texto(cls, valor, padrao=None):
        try:
            return cls(valor)
        except ValueError:
            return padrao or cls.CONCLUIDO


class ModoMaoDeObra(Enum):
    ITENS = 'items'
    VALOR_FIXO = 'flat'


@dataclass
class Cliente:
    nome: str
    telefone: str = ''
    cep: str = ''
    uf: str = ''
    cidade: str = ''
    bairro: str = ''
    rua: str = ''
    endereco: str = ''
    id: str = field(default_factory=novo_id)

    def validate(self):
        if not (self.nome or '').strip():
            raise ErroValidacao('Informe o nome do cliente.')

    def montar_endereco(self) -> str:
        return f"{self.rua}, {self.bairro}, {self.cidade}-{self.uf}"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.nome,
            'phone': self.telefone,
            'address': self.endereco,
            'cep': self.cep,
            'state': self.uf,
            'city': self.cidade,
            'neighborhood': self.bairro,
            'street': self.rua,
        }

    @classmethod
    def from_dict(cls, dados: dict) -> 'Cliente':
        return cls(
            id=str(dados.get('id') or novo_id()),
            nome=dados.get('name') or '',
            telefone=dados.get('phone') or '',
            endereco=dados.get('address') or '',
            cep=dados.get('cep') or '',
            uf=dados.get('state') or '',
            cidade=dados.get('city') or '',
            bairro=dados.get('neighborhood') or '',
            rua=dados.get('street') or '',
        )


@dataclass
class Material:
    nome: str
    descricao: str = ''
    preco_compra: Decimal = Decimal('0')
    preco_venda: Decimal = Decimal('0')
    estoque: int = 0
    id: str = field(default_factory=novo_id)

    def validate(self):
        if not (self.nome or '').strip():
            raise ErroValidacao('Informe o nome do material.')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.nome,
            'description': self.descricao,
            'purchasePrice': _dinheiro(self.preco_compra),
            'sellingPrice': _dinheiro(self.preco_venda),
            'stock': self.estoque,
        }

    @classmethod
    def from_dict(cls, dados: dict) -> 'Material':
        return cls(
            id=str(dados.get('id') or novo_id()),
            nome=dados.get('name') or '',
            descricao=dados.get('description') or '',
            preco_compra=para_decimal(dados.get('purchasePrice')),
            preco_venda=para_decimal(dados.get('sellingPrice')),
            estoque=para_inteiro(dados.get('stock')),
        )


@dataclass
class TipoServico:
    nome: str
    descricao: str = ''
    valor_base: Decimal = Decimal('0')
    id: str = field(default_factory=novo_id)

    def validate(self):
        if not (self.nome or '').strip():
            raise ErroValidacao('Informe o nome do serviço.')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.nome,
            'description': self.descricao,
            'baseValue': _dinheiro(self.valor_base),
        }

    @classmethod
    def from_dict(cls, dados: dict) -> 'TipoServico':
        return cls(
            id=str(dados.get('id') or novo_id()),
            nome=dados.get('name') or '',
            descricao=dados.get('description') or '',
            valor_base=para_decimal(dados.get('baseValue')),
        )


@dataclass
class ItemServico:
    tipo_servico_id: str
    quantidade: int = 1

    @property
    def ref_id(self) -> str:
        return self.tipo_servico_id

    def to_dict(self) -> dict:
        return {'serviceTypeId': self.tipo_servico_id, 'quantity': self.quantidade}

    @classmethod
    def from_dict(cls, dados: dict) -> 'ItemServico':
        return cls(str(dados.get('serviceTypeId') or ''), max(1, para_inteiro(dados.get('quantity'), 1)))


@dataclass
class ItemMaterial:
    material_id: str
    quantidade: int = 1

    @property
    def ref_id(self) -> str:
        return self.material_id

    def to_dict(self) -> dict:
        return {'materialId': self.material_id, 'quantity': self.quantidade}

    @classmethod
    def from_dict(cls, dados: dict) -> 'ItemMaterial':
        return cls(str(dados.get('materialId') or ''), max(1, para_inteiro(dados.get('quantity'), 1)))


@dataclass
class RegistroServico:
    cliente_id: str
    descricao: str = ''
    data: str = field(default_factory=hoje_iso)
    modo_mao_de_obra: ModoMaoDeObra = ModoMaoDeObra.ITENS
    itens_servico: List[ItemServico] = field(default_factory=list)
    itens_material: List[ItemMaterial] = field(default_factory=list)
    forma_pagamento: FormaPagamento = FormaPagamento.PIX
    parcelas: int = 1
    status: StatusServico = StatusServico.CONCLUIDO
    valor_servico: Decimal = Decimal('0')
    desconto: Decimal = Decimal('0')
    valor_total: Decimal = Decimal('0')
    id: str = field(default_factory=novo_id)

    @property
    def numero(self) -> str:
        """Número curto do documento: últimos 6 caracteres do id."""
        return self.id[-6:].upper()

    def validate(self):
        if not (self.cliente_id or '').strip():
            raise ErroValidacao('Escolha um cliente.')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'customerId': self.cliente_id,
            'description': self.descricao,
            'date': self.data,
            'laborMode': self.modo_mao_de_obra.value,
            'serviceItems': [i.to_dict() for i in self.itens_servico],
            'materials': [i.to_dict() for i in self.itens_material],
            'paymentMethod': self.forma_pagamento.value,
            'installments': self.parcelas,
            'status': self.status.value,
            'serviceValue': _dinheiro(self.valor_servico),
            'discount': _dinheiro(self.desconto),
            'totalValue': _dinheiro(self.valor_total),
        }

    @classmethod
    def from_dict(cls, dados: dict) -> 'RegistroServico':
        modo = dados.get('laborMode')
        if modo is None:
            # backups antigos: sem itens de catálogo => mão de obra digitada
            modo = 'items' if 'serviceItems' in dados else 'flat'
        try:
            modo = ModoMaoDeObra(modo)
        except ValueError:
            modo = ModoMaoDeObra.ITENS
        return cls(
            id=str(dados.get('id') or novo_id()),
            cliente_id=str(dados.get('customerId') or ''),
            descricao=dados.get('description') or '',
            data=dados.get('date') or hoje_iso(),
            modo_mao_de_obra=modo,
            itens_servico=[ItemServico.from_dict(i) for i in dados.get('serviceItems') or []],
            itens_material=[ItemMaterial.from_dict(i) for i in dados.get('materials') or []],
            forma_pagamento=FormaPagamento.de_texto(dados.get('paymentMethod')),
            parcelas=max(1, para_inteiro(dados.get('installments'), 1)),
            status=StatusServico.de_texto(dados.get('status')),
            valor_servico=para_decimal(dados.get('serviceValue')),
            desconto=para_decimal(dados.get('discount')),
            valor_total=para_decimal(dados.get('totalValue')),
        )


@dataclass
class EstadoApp:
    clientes: List[Cliente] = field(default_factory=list)
    materiais: List[Material] = field(default_factory=list)
    tipos_servico: List[TipoServico] = field(default_factory=list)
    servicos: List[RegistroServico] = field(default_factory=list)

    def cliente(self, cliente_id) -> Optional[Cliente]:
        return next((c for c in self.clientes if c.id == cliente_id), None)

    def material(self, material_id) -> Optional[Material]:
        return next((m for m in self.materiais if m.id == material_id), None)

    def tipo_servico(self, tipo_id) -> Optional[TipoServico]:
        return next((t for t in self.tipos_servico if t.id == tipo_id), None)

    def servico(self, servico_id) -> Optional[RegistroServico]:
        return next((s for s in self.servicos if s.id == servico_id), None)

    def to_dict(self) -> dict:
        return {
            'customers': [c.to_dict() for c in self.clientes],
            'materials': [m.to_dict() for m in self.materiais],
            'serviceTypes': [t.to_dict() for t in self.tipos_servico],
            'services': [s.to_dict() for s in self.servicos],
        }

    @classmethod
    def from_dict(cls, dados: Optional[dict]) -> 'EstadoApp':
        padrao = {'customers': [], 'materials': [], 'serviceTypes': [], 'services': []}
        dados = {**padrao, **(dados or {})}
        return cls(
            clientes=[Cliente.from_dict(c) for c in dados['customers'] or []],
            materiais=[Material.from_dict(m) for m in dados['materials'] or []],
            tipos_servico=[TipoServico.from_dict(t) for t in dados['serviceTypes'] or []],
            servicos=[RegistroServico.from_dict(s) for s in dados['services'] or []],
        )
