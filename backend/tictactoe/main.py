from flask import Blueprint, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the tic-tac-toe game server!'})

@main.route('/api/hello')
def hello():
    return jsonify({'message': 'Hello from the tic-tac-toe game server!'})
