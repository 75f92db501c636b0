from flask import Blueprint, jsonify

from mazerace import registry

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the maze race server!'})


@main.route('/health')
def health():
    return jsonify({'status': 'healthy', 'rooms': len(registry.store)})
