import os

from starcatcher import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server so /ws leaderboard pushes work in dev
    socketio.run(app, port=int(os.environ.get('PORT', '5001')), debug=True)
