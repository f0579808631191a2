from typo_royale import create_app, socketio

app = create_app()

if __name__ == '__main__':
    port = app.config['PORT']
    app.logger.info(f"Server listening on {port}")
    # Use SocketIO server to enable websockets
    socketio.run(app, host='0.0.0.0', port=port, allow_unsafe_werkzeug=True)
