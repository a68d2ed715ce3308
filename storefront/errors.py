from flask import jsonify


class ContentValidationError(Exception):
    """Promotional content payload failed validation."""
    pass


class ContentNotFoundError(Exception):
    """Requested promotional content does not exist."""
    pass


def register_error_handlers(app):
    @app.errorhandler(ContentValidationError)
    def handle_validation_error(error):
        response = jsonify({
            "message": str(error)
        })
        response.status_code = 400
        return response

    @app.errorhandler(ContentNotFoundError)
    def handle_not_found(error):
        response = jsonify({
            "message": str(error)
        })
        response.status_code = 404
        return response
