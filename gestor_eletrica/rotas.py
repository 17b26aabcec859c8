from dataclasses import replace
from datetime import date
import logging

from flask import (Blueprint, current_app, flash, jsonify, make_response, redirect,
                   render_template, request, url_for)

from .calculos import adicionar_item, calcular_totais, remover_item
from .consultas import buscar_cep, listar_cidades, listar_estados
from .entidades import (Cliente, ErroValidacao, FormaPagamento, ItemMaterial, ItemServico,
                        Material, ModoMaoDeObra, RegistroServico, StatusServico, TipoServico)
from .formatacao import hoje_iso, nao_negativo, para_decimal, para_inteiro
from .insights import gerar_analise
from .operacoes import (excluir_cliente, excluir_material, excluir_servico, excluir_tipo_servico,
                        preparar_servico, salvar_cliente, salvar_material, salvar_servico,
                        salvar_tipo_servico)
from .persistencia import carregar_estado, exportar_backup, importar_backup, salvar_estado
from .recibo import (ErroDocumento, gerar_pdf, link_whatsapp, montar_recibo, nome_arquivo_pdf)
from .relatorios import montar_calendario, nome_cliente, resumo_painel

logger = logging.getLogger(__name__)

gestor_bp = Blueprint('gestor', __name__)


# ------------------------- helpers -------------------------
def _estado():
    return carregar_estado(current_app.config['CHAVE_ESTADO'])


def _salvar(estado):
    salvar_estado(estado, current_app.config['CHAVE_ESTADO'])


def _empresa():
    cfg = current_app.config
    return {
        'nome': cfg['EMPRESA_NOME'],
        'tecnico': cfg['EMPRESA_TECNICO'],
        'contato': cfg['EMPRESA_CONTATO'],
    }


def _texto(campo):
    return (request.form.get(campo) or '').strip()


def _cliente_do_form(cliente_id=None):
    cliente = Cliente(
        nome=_texto('nome'),
        telefone=_texto('telefone'),
        cep=_texto('cep'),
        uf=_texto('uf').upper(),
        cidade=_texto('cidade'),
        bairro=_texto('bairro'),
        rua=_texto('rua'),
        endereco=_texto('endereco'),
    )
    return replace(cliente, id=cliente_id) if cliente_id else cliente


def _material_do_form(material_id=None):
    material = Material(
        nome=_texto('nome'),
        descricao=_texto('descricao'),
        preco_compra=nao_negativo(para_decimal(request.form.get('preco_compra'))),
        preco_venda=nao_negativo(para_decimal(request.form.get('preco_venda'))),
        estoque=para_inteiro(request.form.get('estoque')),
    )
    return replace(material, id=material_id) if material_id else material


def _tipo_do_form(tipo_id=None):
    tipo = TipoServico(
        nome=_texto('nome'),
        descricao=_texto('descricao'),
        valor_base=nao_negativo(para_decimal(request.form.get('valor_base'))),
    )
    return replace(tipo, id=tipo_id) if tipo_id else tipo


def _itens_do_form(classe, campo_id, campo_qtd):
    itens = []
    for ref_id, qtd in zip(request.form.getlist(campo_id), request.form.getlist(campo_qtd)):
        if ref_id:
            itens = adicionar_item(itens, classe(ref_id, max(1, para_inteiro(qtd, 1))))
    return itens


def _registro_do_form(registro_id=None):
    forma = FormaPagamento.de_texto(request.form.get('forma_pagamento'))
    try:
        modo = ModoMaoDeObra(request.form.get('modo_mao_de_obra') or 'items')
    except ValueError:
        modo = ModoMaoDeObra.ITENS
    registro = RegistroServico(
        cliente_id=_texto('cliente_id'),
        descricao=_texto('descricao'),
        data=_texto('data') or hoje_iso(),
        modo_mao_de_obra=modo,
        itens_servico=_itens_do_form(ItemServico, 'item_servico_id', 'item_servico_qtd'),
        itens_material=_itens_do_form(ItemMaterial, 'item_material_id', 'item_material_qtd'),
        forma_pagamento=forma,
        parcelas=max(1, para_inteiro(request.form.get('parcelas'), 1)),
        status=StatusServico.de_texto(request.form.get('status')),
        valor_servico=nao_negativo(para_decimal(request.form.get('valor_servico'))),
        # desconto negativo é ignorado na entrada
        desconto=nao_negativo(para_decimal(request.form.get('desconto'))),
    )
    return replace(registro, id=registro_id) if registro_id else registro


def _aplicar_acao_itens(registro, acao):
    """Adiciona/remove linhas do formulário de serviço sem salvar."""
    if acao == 'adicionar_servico' and _texto('novo_servico_id'):
        novo = ItemServico(_texto('novo_servico_id'), max(1, para_inteiro(request.form.get('novo_servico_qtd'), 1)))
        return replace(registro, itens_servico=adicionar_item(registro.itens_servico, novo))
    if acao == 'adicionar_material' and _texto('novo_material_id'):
        novo = ItemMaterial(_texto('novo_material_id'), max(1, para_inteiro(request.form.get('novo_material_qtd'), 1)))
        return replace(registro, itens_material=adicionar_item(registro.itens_material, novo))
    if acao and acao.startswith('remover_servico:'):
        return replace(registro, itens_servico=remover_item(registro.itens_servico, acao.split(':', 1)[1]))
    if acao and acao.startswith('remover_material:'):
        return replace(registro, itens_material=remover_item(registro.itens_material, acao.split(':', 1)[1]))
    return registro


# ------------------------- painel -------------------------
@gestor_bp.route('/')
def dashboard():
    estado = _estado()
    cfg = current_app.config
    resumo = resumo_painel(
        estado,
        limite_baixo=cfg['LIMITE_ESTOQUE_BAIXO'],
        limite_critico=cfg['LIMITE_ESTOQUE_CRITICO'],
        quantidade_recentes=cfg['QTD_SERVICOS_RECENTES'],
    )
    return render_template('dashboard.html', resumo=resumo, tem_materiais=bool(estado.materiais))


@gestor_bp.route('/calendario')
def calendario():
    hoje = date.today()
    ano = para_inteiro(request.args.get('ano'), hoje.year)
    mes = para_inteiro(request.args.get('mes'), hoje.month)
    if not 1 <= mes <= 12 or not 1 <= ano <= 9999:
        ano, mes = hoje.year, hoje.month
    mes_calendario = montar_calendario(_estado(), ano, mes, hoje=hoje)
    return render_template('calendario.html', cal=mes_calendario)


# ------------------------- clientes -------------------------
@gestor_bp.route('/clientes', methods=['GET', 'POST'])
def listar_clientes():
    estado = _estado()
    cliente = Cliente(nome='')

    if request.method == 'POST':
        cliente = _cliente_do_form()
        if request.form.get('acao') == 'buscar_cep':
            cliente = _preencher_endereco(cliente)
        else:
            try:
                _salvar(salvar_cliente(estado, cliente))
            except ErroValidacao as e:
                flash(str(e), 'danger')
                return render_template('clientes.html', clientes=estado.clientes, cliente=cliente,
                                       editando=False, busca='')
            flash('Cliente cadastrado com sucesso!', 'success')
            return redirect(url_for('gestor.listar_clientes'))

    termo = request.args.get('busca', '').strip()
    clientes = estado.clientes
    if termo:
        clientes = [c for c in clientes if termo.lower() in c.nome.lower()]
    return render_template('clientes.html', clientes=clientes, cliente=cliente, editando=False, busca=termo)


@gestor_bp.route('/cliente/<cliente_id>/editar', methods=['GET', 'POST'])
def editar_cliente(cliente_id):
    estado = _estado()
    cliente = estado.cliente(cliente_id)
    if cliente is None:
        flash('Cliente não encontrado.', 'warning')
        return redirect(url_for('gestor.listar_clientes'))

    if request.method == 'POST':
        cliente = _cliente_do_form(cliente_id)
        if request.form.get('acao') == 'buscar_cep':
            cliente = _preencher_endereco(cliente)
        else:
            try:
                _salvar(salvar_cliente(estado, cliente))
            except ErroValidacao as e:
                flash(str(e), 'danger')
            else:
                flash('Cliente atualizado com sucesso!', 'success')
                return redirect(url_for('gestor.listar_clientes'))

    return render_template('clientes.html', clientes=estado.clientes, cliente=cliente, editando=True, busca='')


@gestor_bp.route('/cliente/<cliente_id>/excluir', methods=['POST'])
def remover_cliente(cliente_id):
    _salvar(excluir_cliente(_estado(), cliente_id))
    flash('Cliente removido.', 'success')
    return redirect(url_for('gestor.listar_clientes'))


def _preencher_endereco(cliente):
    endereco = buscar_cep(cliente.cep, timeout=current_app.config['TIMEOUT_CONSULTAS'])
    if endereco is None:
        flash('CEP não encontrado; preencha o endereço manualmente.', 'warning')
        return cliente
    return replace(cliente, cep=endereco.cep, rua=endereco.rua or cliente.rua,
                   bairro=endereco.bairro or cliente.bairro,
                   cidade=endereco.cidade or cliente.cidade, uf=endereco.uf or cliente.uf)


# ------------------------- catálogo de serviços -------------------------
@gestor_bp.route('/catalogo', methods=['GET', 'POST'])
def listar_tipos_servico():
    estado = _estado()
    tipo = TipoServico(nome='')
    if request.method == 'POST':
        tipo = _tipo_do_form()
        try:
            _salvar(salvar_tipo_servico(estado, tipo))
        except ErroValidacao as e:
            flash(str(e), 'danger')
        else:
            flash('Serviço cadastrado com sucesso!', 'success')
            return redirect(url_for('gestor.listar_tipos_servico'))
    return render_template('catalogo.html', tipos=estado.tipos_servico, tipo=tipo, editando=False)


@gestor_bp.route('/catalogo/<tipo_id>/editar', methods=['GET', 'POST'])
def editar_tipo_servico(tipo_id):
    estado = _estado()
    tipo = estado.tipo_servico(tipo_id)
    if tipo is None:
        flash('Serviço não encontrado.', 'warning')
        return redirect(url_for('gestor.listar_tipos_servico'))
    if request.method == 'POST':
        tipo = _tipo_do_form(tipo_id)
        try:
            _salvar(salvar_tipo_servico(estado, tipo))
        except ErroValidacao as e:
            flash(str(e), 'danger')
        else:
            flash('Serviço atualizado com sucesso!', 'success')
            return redirect(url_for('gestor.listar_tipos_servico'))
    return render_template('catalogo.html', tipos=estado.tipos_servico, tipo=tipo, editando=True)


@gestor_bp.route('/catalogo/<tipo_id>/excluir', methods=['POST'])
def remover_tipo_servico(tipo_id):
    _salvar(excluir_tipo_servico(_estado(), tipo_id))
    flash('Serviço removido do catálogo.', 'success')
    return redirect(url_for('gestor.listar_tipos_servico'))


# ------------------------- materiais -------------------------
@gestor_bp.route('/materiais', methods=['GET', 'POST'])
def listar_materiais():
    estado = _estado()
    material = Material(nome='')
    if request.method == 'POST':
        material = _material_do_form()
        try:
            _salvar(salvar_material(estado, material))
        except ErroValidacao as e:
            flash(str(e), 'danger')
        else:
            flash('Material cadastrado com sucesso!', 'success')
            return redirect(url_for('gestor.listar_materiais'))
    return render_template('materiais.html', materiais=estado.materiais, material=material, editando=False)


@gestor_bp.route('/material/<material_id>/editar', methods=['GET', 'POST'])
def editar_material(material_id):
    estado = _estado()
    material = estado.material(material_id)
    if material is None:
        flash('Material não encontrado.', 'warning')
        return redirect(url_for('gestor.listar_materiais'))
    if request.method == 'POST':
        material = _material_do_form(material_id)
        try:
            _salvar(salvar_material(estado, material))
        except ErroValidacao as e:
            flash(str(e), 'danger')
        else:
            flash('Material atualizado com sucesso!', 'success')
            return redirect(url_for('gestor.listar_materiais'))
    return render_template('materiais.html', materiais=estado.materiais, material=material, editando=True)


@gestor_bp.route('/material/<material_id>/excluir', methods=['POST'])
def remover_material(material_id):
    _salvar(excluir_material(_estado(), material_id))
    flash('Material removido.', 'success')
    return redirect(url_for('gestor.listar_materiais'))


# ------------------------- serviços -------------------------
@gestor_bp.route('/servicos')
def listar_servicos():
    estado = _estado()
    termo = request.args.get('busca', '').strip().lower()
    status = request.args.get('status', '').strip()

    linhas = []
    for s in reversed(estado.servicos):
        cliente = nome_cliente(estado, s.cliente_id)
        if termo and termo not in cliente.lower() and termo not in s.data:
            continue
        if status and s.status.value != status:
            continue
        linhas.append({'servico': s, 'cliente': cliente})

    return render_template('servicos.html', linhas=linhas, busca=termo, status=status,
                           status_opcoes=list(StatusServico))


def _form_servico(estado, registro, editando):
    return render_template(
        'servico_form.html',
        registro=registro,
        totais=calcular_totais(registro, estado),
        estado=estado,
        editando=editando,
        formas=list(FormaPagamento),
        status_opcoes=list(StatusServico),
        credito=FormaPagamento.CARTAO_CREDITO,
    )


def _processar_form_servico(estado, registro_id, editando):
    registro = _registro_do_form(registro_id)
    acao = request.form.get('acao', 'salvar')
    if acao != 'salvar':
        registro = preparar_servico(estado, _aplicar_acao_itens(registro, acao))
        return _form_servico(estado, registro, editando)

    try:
        _salvar(salvar_servico(estado, registro))
    except ErroValidacao as e:
        flash(str(e), 'danger')
        return _form_servico(estado, preparar_servico(estado, registro), editando)

    flash('Serviço salvo com sucesso!', 'success')
    return redirect(url_for('gestor.visualizar_servico', servico_id=registro.id))


@gestor_bp.route('/servicos/novo', methods=['GET', 'POST'])
def novo_servico():
    estado = _estado()
    if request.method == 'POST':
        return _processar_form_servico(estado, None, editando=False)
    registro = RegistroServico(cliente_id=request.args.get('cliente_id', ''),
                               data=request.args.get('data') or hoje_iso())
    return _form_servico(estado, registro, editando=False)


@gestor_bp.route('/servico/<servico_id>/editar', methods=['GET', 'POST'])
def editar_servico(servico_id):
    estado = _estado()
    registro = estado.servico(servico_id)
    if registro is None:
        flash('Serviço não encontrado.', 'warning')
        return redirect(url_for('gestor.listar_servicos'))
    if request.method == 'POST':
        return _processar_form_servico(estado, servico_id, editando=True)
    return _form_servico(estado, registro, editando=True)


@gestor_bp.route('/servicos/totais', methods=['POST'])
def totais_servico():
    registro = _registro_do_form()
    totais = calcular_totais(registro, _estado())
    return jsonify({
        'serviceValue': float(totais.mao_de_obra),
        'materialsValue': float(totais.materiais),
        'discount': float(totais.desconto),
        'totalValue': float(totais.total),
    })


@gestor_bp.route('/servico/<servico_id>/excluir', methods=['POST'])
def remover_servico(servico_id):
    _salvar(excluir_servico(_estado(), servico_id))
    flash('Registro excluído.', 'success')
    return redirect(url_for('gestor.listar_servicos'))


# 🔍 Visualizar nota de serviço
@gestor_bp.route('/servico/<servico_id>')
def visualizar_servico(servico_id):
    estado = _estado()
    registro = estado.servico(servico_id)
    if registro is None:
        flash('Serviço não encontrado.', 'warning')
        return redirect(url_for('gestor.listar_servicos'))
    recibo = montar_recibo(registro, estado, _empresa())
    return render_template('recibo.html', recibo=recibo, registro=registro)


# 🖨️ Gerar PDF do recibo
@gestor_bp.route('/servico/<servico_id>/pdf')
def gerar_pdf_servico(servico_id):
    estado = _estado()
    registro = estado.servico(servico_id)
    if registro is None:
        flash('Serviço não encontrado.', 'warning')
        return redirect(url_for('gestor.listar_servicos'))

    html = render_template('recibo_pdf.html', recibo=montar_recibo(registro, estado, _empresa()))
    try:
        pdf = gerar_pdf(html)
    except ErroDocumento as e:
        flash(str(e), 'danger')
        return redirect(url_for('gestor.visualizar_servico', servico_id=servico_id))

    response = make_response(pdf)
    response.headers['Content-Type'] = 'application/pdf'
    response.headers['Content-Disposition'] = f'attachment; filename={nome_arquivo_pdf(registro, estado)}'
    return response


@gestor_bp.route('/servico/<servico_id>/whatsapp')
def compartilhar_whatsapp(servico_id):
    estado = _estado()
    registro = estado.servico(servico_id)
    if registro is None:
        flash('Serviço não encontrado.', 'warning')
        return redirect(url_for('gestor.listar_servicos'))
    try:
        link = link_whatsapp(registro, estado, current_app.config['EMPRESA_NOME'])
    except ErroValidacao as e:
        flash(str(e), 'danger')
        return redirect(url_for('gestor.visualizar_servico', servico_id=servico_id))
    return redirect(link)


# ------------------------- backup -------------------------
@gestor_bp.route('/backup')
def baixar_backup():
    nome, conteudo = exportar_backup(_estado())
    response = make_response(conteudo)
    response.headers['Content-Type'] = 'application/json; charset=utf-8'
    response.headers['Content-Disposition'] = f'attachment; filename={nome}'
    return response


@gestor_bp.route('/backup/restaurar', methods=['POST'])
def restaurar_backup():
    arquivo = request.files.get('arquivo')
    if not arquivo:
        flash('Selecione um arquivo de backup.', 'danger')
        return redirect(url_for('gestor.dashboard'))
    try:
        estado = importar_backup(arquivo.read().decode('utf-8'))
    except (ErroValidacao, UnicodeDecodeError) as e:
        flash(str(e) if isinstance(e, ErroValidacao) else 'Arquivo de backup inválido.', 'danger')
        return redirect(url_for('gestor.dashboard'))
    _salvar(estado)
    logger.info("Backup restaurado: %d clientes, %d serviços", len(estado.clientes), len(estado.servicos))
    flash('Backup restaurado com sucesso!', 'success')
    return redirect(url_for('gestor.dashboard'))


# ------------------------- consultas externas -------------------------
@gestor_bp.route('/consulta-cep/<cep>')
def consulta_cep(cep):
    endereco = buscar_cep(cep, timeout=current_app.config['TIMEOUT_CONSULTAS'])
    if endereco is None:
        return jsonify({'erro': 'CEP não encontrado'}), 404
    return jsonify(endereco.to_dict())


@gestor_bp.route('/estados')
def consulta_estados():
    estados = listar_estados(timeout=current_app.config['TIMEOUT_CONSULTAS'])
    return jsonify([{'sigla': s, 'nome': n} for s, n in estados])


@gestor_bp.route('/estados/<uf>/cidades')
def consulta_cidades(uf):
    return jsonify(listar_cidades(uf, timeout=current_app.config['TIMEOUT_CONSULTAS']))


# ------------------------- análise IA -------------------------
@gestor_bp.route('/insights', methods=['GET', 'POST'])
def insights():
    analise = None
    if request.method == 'POST':
        analise = gerar_analise(
            _estado(),
            current_app.config['GEMINI_API_KEY'],
            current_app.config['GEMINI_MODEL'],
        )
    return render_template('insights.html', analise=analise)
