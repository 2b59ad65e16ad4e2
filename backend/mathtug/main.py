from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Math Tug-of-War game server!'})

@main.route('/health')
def health():
    stats = current_app.extensions['mathtug'].stats()
    return jsonify({'status': 'ok', **stats})
