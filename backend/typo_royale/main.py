from flask import Blueprint

main = Blueprint('main', __name__)


@main.route('/')
def index():
    # Liveness only; plain text, no JSON contract
    return 'Typo Royale backend running', 200, {'Content-Type': 'text/plain; charset=utf-8'}
