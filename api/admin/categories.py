"""
Category administration routes.

Routes:
    GET    /categories          List categories with published post counts
    POST   /categories          Create a category
    PUT    /categories/<id>     Edit a category
    DELETE /categories/<id>     Delete a category; its posts keep no category
"""

from flask import jsonify

from api.auth.decorators import admin_required
from api.schemas import load_json
from services.category_service import CategoryService
from . import admin_api
from .schemas import CategorySchema


@admin_api.route('/categories', methods=['GET'])
@admin_required
def list_categories():
    return jsonify({"items": CategoryService.list_categories()}), 200


@admin_api.route('/categories', methods=['POST'])
@admin_required
def create_category():
    """
    Create a category.

    Request Body:
        name (str): Category name (unique)
        slug (str, optional): URL slug, generated from the name when absent
        description (str, optional): Description
        color (str, optional): Display color as ``#rrggbb``

    Returns:
        JSON: Created category, 201
    """
    category = CategoryService.create_category(load_json(CategorySchema))
    return jsonify(category.to_dict()), 201


@admin_api.route('/categories/<int:category_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_category(category_id):
    category = CategoryService.update_category(category_id, load_json(CategorySchema))
    return jsonify(category.to_dict()), 200


@admin_api.route('/categories/<int:category_id>', methods=['DELETE'])
@admin_required
def delete_category(category_id):
    CategoryService.delete_category(category_id)
    return '', 204
