from flask import Blueprint, jsonify, request, current_app
from sqlalchemy.exc import SQLAlchemyError

from starcatcher import db
from starcatcher.services.leaderboard import (
    list_entries,
    insert_entry,
    upsert_entry,
    delete_entry,
    clear_entries,
)
from starcatcher.validation import validate_name, parse_score_level


leaderboard = Blueprint('leaderboard', __name__)


def _store_error(exc: Exception, action: str):
    db.session.rollback()
    current_app.logger.exception(f"[lb-error] action={action} error={exc}")
    return jsonify({'error': str(exc)}), 500


@leaderboard.route('', methods=['GET'])
def get_leaderboard():
    try:
        entries = list_entries()
    except SQLAlchemyError as exc:
        return _store_error(exc, 'list')
    return jsonify([e.to_dict() for e in entries])


@leaderboard.route('', methods=['POST'])
def add_entry():
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    name_error = validate_name(name)
    if name_error:
        return jsonify({'error': name_error}), 400
    score, level, error = parse_score_level(data)
    if error:
        return jsonify({'error': error}), 400

    try:
        entry = insert_entry(name.strip(), score, level)
    except SQLAlchemyError as exc:
        return _store_error(exc, 'insert')
    return jsonify({'success': True, 'newEntry': entry.to_dict()}), 201


@leaderboard.route('/<string:name>', methods=['PUT'])
def update_entry(name):
    name_error = validate_name(name)
    if name_error:
        return jsonify({'error': name_error}), 400
    data = request.get_json(silent=True) or {}
    score, level, error = parse_score_level(data)
    if error:
        return jsonify({'error': error}), 400

    try:
        entry = upsert_entry(name.strip(), score, level)
    except SQLAlchemyError as exc:
        return _store_error(exc, 'upsert')
    return jsonify({'success': True, 'updatedPlayer': entry.to_dict()})


@leaderboard.route('/<string:name>', methods=['DELETE'])
def remove_entry(name):
    try:
        deleted = delete_entry(name)
    except SQLAlchemyError as exc:
        return _store_error(exc, 'delete')
    if deleted is None:
        return jsonify({'error': 'Player not found'}), 404
    return jsonify({'success': True, 'message': f'{name} deleted', 'deleted': deleted})


@leaderboard.route('', methods=['DELETE'])
def clear_leaderboard():
    try:
        clear_entries()
    except SQLAlchemyError as exc:
        return _store_error(exc, 'clear')
    return jsonify({'success': True, 'message': 'Leaderboard cleared'})
