import os


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///gestor_eletrica.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")

    # chave do blob de estado (mesma do localStorage original)
    CHAVE_ESTADO = os.getenv("CHAVE_ESTADO", "gestor_pro_state")

    # Identidade da empresa no recibo
    EMPRESA_NOME = os.getenv("EMPRESA_NOME", "RM ELÉTRICA & SOLUÇÕES")
    EMPRESA_TECNICO = os.getenv("EMPRESA_TECNICO", "Renan Morais")
    EMPRESA_CONTATO = os.getenv("EMPRESA_CONTATO", "(14) 99179-8868")

    LIMITE_ESTOQUE_BAIXO = int(os.getenv("LIMITE_ESTOQUE_BAIXO", "10"))
    LIMITE_ESTOQUE_CRITICO = int(os.getenv("LIMITE_ESTOQUE_CRITICO", "5"))
    QTD_SERVICOS_RECENTES = 5

    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

    TIMEOUT_CONSULTAS = float(os.getenv("TIMEOUT_CONSULTAS", "8"))
