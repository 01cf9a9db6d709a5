from atlas import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server so /ws clients get live session and leaderboard updates
    socketio.run(app, debug=True)
