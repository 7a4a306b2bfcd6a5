from flask import Flask, request, jsonify
from flask_cors import CORS
from payout_engine import ShowProcessor
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the UI calls the API for live payout previews)
CORS(app)

# Negative minimum-logic payouts are kept as-is unless explicitly floored
FLOOR_NEGATIVE_PAYOUTS = os.environ.get("FLOOR_NEGATIVE_PAYOUTS", "false").lower() == "true"

# Initialize the show processor
processor = ShowProcessor(floor_negative_payouts=FLOOR_NEGATIVE_PAYOUTS)


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Band Payout Engine API",
        "version": "1.0",
        "endpoints": {
            "calculate_payouts": "/calculate_payouts [POST]",
            "recalculate_payouts": "/recalculate_payouts [POST]",
            "cancel_show": "/cancel_show [POST]",
            "restore_show": "/restore_show [POST]",
            "toggle_paid": "/toggle_paid [POST]",
            "allocate_retained": "/allocate_retained [POST]",
            "admin_earnings": "/earnings/admin [POST]",
            "member_earnings": "/earnings/member [POST]",
            "policy": "/policy [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


def run_operation(operation):
    """
    Run one engine operation on the request body
    """
    try:
        # Get input data
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        # Log request
        show_title = (input_data.get("show") or {}).get("title", "Unknown")
        logger.info(f"Running {operation} for show: {show_title}")

        # Process through engine
        result = processor.process_from_dict(operation, input_data)

        logger.info(f"{operation} completed: {show_title}")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine (missing fields, bad values)
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "failed"
        }), 500


@app.route("/calculate_payouts", methods=["POST"])
def calculate_payouts():
    """Compute and freeze payouts for a show's member list"""
    return run_operation("calculate_payouts")


@app.route("/recalculate_payouts", methods=["POST"])
def recalculate_payouts():
    """Recompute frozen member rows against updated show financials"""
    return run_operation("recalculate_payouts")


@app.route("/cancel_show", methods=["POST"])
def cancel_show():
    """Cancel a show and split refund / retained funds"""
    return run_operation("cancel_show")


@app.route("/restore_show", methods=["POST"])
def restore_show():
    """Undo a cancellation"""
    return run_operation("restore_show")


@app.route("/toggle_paid", methods=["POST"])
def toggle_paid():
    """Flip a show's paid status"""
    return run_operation("toggle_paid")


@app.route("/allocate_retained", methods=["POST"])
def allocate_retained():
    """Distribute a cancelled show's retained funds across members"""
    return run_operation("allocate_retained")


@app.route("/earnings/admin", methods=["POST"])
def admin_earnings():
    """Founder earnings summary"""
    return run_operation("admin_earnings")


@app.route("/earnings/member", methods=["POST"])
def member_earnings():
    """One member's earnings summary"""
    return run_operation("member_earnings")


@app.route("/policy", methods=["POST"])
def policy():
    """Plain-language payout policy for a member config"""
    return run_operation("describe_policy")


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
