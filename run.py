from eventus import create_app
import os

app = create_app(os.getenv('FLASK_CONFIG') or 'default')

if __name__ == '__main__':
    # Bind em localhost e sem reloader para rodar direto com `python run.py`
    app.run(host='127.0.0.1', port=3000, debug=True, use_reloader=False)
