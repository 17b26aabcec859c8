from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()


class EstadoSalvo(db.Model):
    __tablename__ = 'estado_salvo'
    id = db.Column(db.Integer, primary_key=True)
    chave = db.Column(db.String(100), unique=True, nullable=False)
    dados = db.Column(db.Text, nullable=False, default='{}')
    atualizado_em = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<EstadoSalvo {self.chave}>"
