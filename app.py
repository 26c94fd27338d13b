import asyncio
import logging

from flask import Flask, request, jsonify

from config import load_settings
from core.storefront import LuxeStorefront
from models.product import Product

logger = logging.getLogger(__name__)


def create_app(storefront=None, settings=None):
    settings = settings or load_settings()
    storefront = storefront or LuxeStorefront(settings)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config['STOREFRONT'] = storefront

    cart = storefront.cart_service
    checkout = storefront.checkout_service

    def respond(result):
        """Result dicts map to 200 on success, 400 otherwise"""
        return jsonify(result), (200 if result.get('success') else 400)

    @app.route('/health')
    def health():
        """Health check endpoint"""
        return jsonify({'status': 'ok', 'message': 'Luxe Storefront is running!'})

    # === cart ===
    @app.route('/api/cart', methods=['GET'])
    def get_cart():
        return jsonify(cart.get_cart_details())

    @app.route('/api/cart/items', methods=['POST'])
    def add_cart_item():
        """Add one unit of a catalog product"""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Product payload is required'}), 400
        try:
            product = Product.from_dict(data)
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        cart.add_item(product)
        return jsonify(cart.get_cart_details())

    @app.route('/api/cart/items/<product_id>', methods=['PATCH'])
    def update_cart_item(product_id):
        data = request.get_json(silent=True) or {}
        delta = data.get('delta')
        if isinstance(delta, bool) or not isinstance(delta, int):
            return jsonify({'error': 'delta must be an integer'}), 400

        cart.update_quantity(product_id, delta)
        return jsonify(cart.get_cart_details())

    @app.route('/api/cart/items/<product_id>', methods=['DELETE'])
    def remove_cart_item(product_id):
        cart.remove_item(product_id)
        return jsonify(cart.get_cart_details())

    @app.route('/api/cart', methods=['DELETE'])
    def clear_cart():
        cart.clear()
        return jsonify(cart.get_cart_details())

    @app.route('/api/cart/open', methods=['POST'])
    def open_cart():
        cart.open_cart()
        return jsonify(cart.get_cart_details())

    @app.route('/api/cart/close', methods=['POST'])
    def close_cart():
        cart.close_cart()
        return jsonify(cart.get_cart_details())

    # === checkout ===
    @app.route('/api/checkout', methods=['GET'])
    def get_checkout():
        return jsonify(checkout.get_checkout_details())

    @app.route('/api/checkout/open', methods=['POST'])
    def open_checkout():
        return respond(checkout.open())

    @app.route('/api/checkout/fields', methods=['PUT'])
    def update_checkout_fields():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'A JSON object of fields is required'}), 400
        return respond(checkout.update_fields(data))

    @app.route('/api/checkout/next', methods=['POST'])
    def next_checkout_step():
        """Continue to payment, or pay on the payment step"""
        return respond(asyncio.run(checkout.advance()))

    @app.route('/api/checkout/back', methods=['POST'])
    def previous_checkout_step():
        return respond(checkout.back())

    @app.route('/api/checkout/close', methods=['POST'])
    def close_checkout():
        return respond(checkout.close())

    return app


if __name__ == '__main__':
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    app = create_app(settings=settings)

    print("=== Luxe Storefront Server ===")
    print(f"Starting server on http://localhost:{settings.port}")
    print("Press Ctrl+C to stop")

    app.run(
        host='0.0.0.0',
        port=settings.port,
        debug=settings.debug,
        threaded=False
    )
