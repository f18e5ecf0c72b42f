"""
Point d'entrée Flask.

L'API est un thin adapter au-dessus des orchestrateurs : elle permet
de rejouer ou de simuler à la main la livraison d'un lot de messages,
et expose les vues de lecture. Elle ne contient aucune logique métier.
"""

from __future__ import annotations

from flask import Flask, jsonify, request

from inventory.domain.commands import Direction
from inventory.service_layer import bootstrap, unit_of_work
from inventory.views import views

app = Flask(__name__)
session_factory = unit_of_work.default_session_factory()
workers = bootstrap.bootstrap_all(session_factory=session_factory)

WORKER_ROUTES = {
    "payment-accepted": Direction.PAYMENT_ACCEPTED,
    "payment-rejected": Direction.PAYMENT_REJECTED,
}


@app.route("/workers/<worker>", methods=["POST"])
def process_batch_endpoint(worker: str):
    """
    POST /workers/<payment-accepted|payment-rejected>
    Body JSON : { Records: [{ messageId, body }] }

    Traite le lot et retourne { retryIds: [...] }.
    """
    direction = WORKER_ROUTES.get(worker)
    if direction is None:
        return jsonify({"message": f"Worker inconnu : {worker}"}), 404

    batch = request.get_json(silent=True)
    if not isinstance(batch, dict):
        return jsonify({"message": "Le corps doit être un objet JSON"}), 400

    return jsonify(workers[direction].process_batch(batch)), 200


@app.route("/allocations/<order_id>", methods=["GET"])
def allocations_view_endpoint(order_id: str):
    result = views.allocations(order_id, session_factory)
    if not result:
        return "not found", 404
    return jsonify(result), 200


@app.route("/stock/<sku>", methods=["GET"])
def stock_view_endpoint(sku: str):
    result = views.stock(sku, session_factory)
    if result is None:
        return "not found", 404
    return jsonify(result), 200
