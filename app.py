from gestor_eletrica import create_app

app = create_app()

# 🚀 Executa o servidor
if __name__ == '__main__':
    app.run(debug=True)
