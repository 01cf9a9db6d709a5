from flask import Blueprint, jsonify
from atlas import get_atlas

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the Atlas game server!',
        'nations': len(get_atlas().catalog),
    })
