from inscriptions import create_app
import os

app = create_app(os.getenv('FLASK_CONFIG') or 'default')

if __name__ == '__main__':
    # Bind to localhost without the reloader when started directly
    app.run(host='127.0.0.1', port=int(os.getenv('PORT', 3000)), debug=True,
            use_reloader=False)
