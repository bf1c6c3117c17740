from flask import Blueprint, current_app, jsonify, request

sessions = Blueprint('sessions', __name__)


def _dispatcher():
    return current_app.extensions['session_sync']


@sessions.route('/create', methods=['POST'])
def create_session():
    data = request.get_json(silent=True) or {}
    variant = data.get('variant')
    store = _dispatcher().store
    if variant is not None and (not isinstance(variant, str) or variant not in store.variants):
        return jsonify({'error': f'Unknown variant {variant!r}'}), 400
    session = store.create(variant)
    return jsonify(session.to_dict()), 201


@sessions.route('/variants', methods=['GET'])
def list_variants():
    store = _dispatcher().store
    return jsonify({
        'default': store.default_variant,
        'variants': [store.variants[name].to_dict() for name in sorted(store.variants)],
    })


@sessions.route('/<int:session_id>', methods=['GET'])
def get_session_state(session_id):
    # Read-only: clients mutate sessions over the socket protocol only
    snapshot = _dispatcher().get_session_snapshot(session_id)
    if snapshot is None:
        return jsonify({'error': 'Session not found'}), 404
    return jsonify(snapshot)
