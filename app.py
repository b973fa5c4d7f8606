"""Flask web application for wedding vendor matching and outreach."""

import logging
import os
from functools import wraps

from flask import Flask, jsonify, request, session

from config import APP_PASSWORD, LOG_LEVEL, SECRET_KEY, validate_env
from wedding_outreach.services.chat_formatter import format_vendor_matches_for_chat
from wedding_outreach.services.delivery_service import DeliveryServiceError
from wedding_outreach.services.llm_service import WEDDING_PLANNER_PROMPT, ChatMessage, LLMServiceError
from wedding_outreach.services.outreach_service import (
    OutreachAccessError,
    OutreachDraft,
    OutreachNotFoundError,
    OutreachServiceError,
)
from wedding_outreach.services.rate_limit import RATE_LIMITS
from wedding_outreach.services.registry import ServiceRegistry, build_default_registry
from wedding_outreach.services.validation import (
    ValidationError,
    is_valid_email,
    parse_match_request,
    sanitize_number,
    sanitize_string,
    validate_array,
)
from wedding_outreach.services.vendor_repository import VendorRepositoryError

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = SECRET_KEY

# Max drafts accepted by a single send-batch request
MAX_EMAILS_PER_BATCH = 100
MAX_CHAT_MESSAGES = 50


def services() -> ServiceRegistry:
    """Service registry for this app (built from config on first use)."""
    registry = app.config.get('SERVICES')
    if registry is None:
        registry = build_default_registry()
        app.config['SERVICES'] = registry
    return registry


def current_user_id() -> str:
    return session['user_id']


def login_required(f):
    """Decorator to require login for API endpoints."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not session.get('user_id'):
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function


def rate_limited(limit_name: str):
    """Decorator applying one of RATE_LIMITS per logged-in user."""
    config = RATE_LIMITS[limit_name]

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            result = services().rate_limiter.check(f"{limit_name}:{current_user_id()}", config)
            if not result.allowed:
                response = jsonify({'error': 'Rate limit exceeded. Please try again later.'})
                response.status_code = 429
                response.headers.update(result.headers())
                return response
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route('/health')
def health():
    return jsonify({'status': 'ok'})


@app.route('/login', methods=['POST'])
def login():
    """Start a session for the given email when the shared password matches."""
    data = json_body()
    email = sanitize_string(data.get('email')).lower()
    password = data.get('password', '')

    if not is_valid_email(email):
        return jsonify({'error': 'Valid email is required'}), 400
    if not APP_PASSWORD or password != APP_PASSWORD:
        return jsonify({'error': 'Incorrect password'}), 401

    session['user_id'] = email
    session['user_email'] = email
    session.permanent = True
    return jsonify({'success': True, 'user': {'id': email, 'email': email}})


@app.route('/logout')
def logout():
    session.pop('user_id', None)
    session.pop('user_email', None)
    return jsonify({'success': True})


@app.route('/api/vendors/match', methods=['POST'])
@login_required
@rate_limited('API_GENERAL')
def api_match_vendors():
    """Rank vendors for the posted requirements."""
    try:
        requirements = parse_match_request(request.get_json(silent=True))
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400

    try:
        matches = services().matching.find_matching_vendors(requirements)
    except VendorRepositoryError:
        logger.exception("Vendor matching failed")
        return jsonify({'error': 'Failed to find matching vendors'}), 500

    return jsonify({
        'success': True,
        'matches': matches.to_dict(),
        'chat_message': format_vendor_matches_for_chat(matches),
    })


@app.route('/api/vendors/matches', methods=['GET'])
@login_required
@rate_limited('API_GENERAL')
def api_wedding_matches():
    """Rank vendors for the user's saved wedding; must-haves act as preferences."""
    wedding = services().weddings.get_current_wedding(current_user_id())
    if wedding is None:
        return jsonify({'error': 'No wedding found'}), 404

    try:
        matches = services().matching.find_matching_vendors(wedding.to_requirements())
    except VendorRepositoryError:
        logger.exception("Vendor matching failed")
        return jsonify({'error': 'Failed to find matching vendors'}), 500

    return jsonify({
        'success': True,
        'wedding_id': wedding.id,
        'matches': matches.to_dict(),
        'chat_message': format_vendor_matches_for_chat(matches),
    })


@app.route('/api/vendors/<vendor_id>', methods=['GET'])
@login_required
def api_get_vendor(vendor_id):
    try:
        vendor = services().matching.repository.get(vendor_id)
    except VendorRepositoryError:
        logger.exception("Vendor lookup failed")
        return jsonify({'error': 'Failed to load vendor'}), 500

    if vendor is None:
        return jsonify({'error': 'Vendor not found'}), 404
    return jsonify({'success': True, 'vendor': vendor.to_dict()})


@app.route('/api/wedding', methods=['GET'])
@login_required
def api_get_wedding():
    wedding = services().weddings.get_current_wedding(current_user_id())
    return jsonify({'wedding': wedding.to_dict() if wedding else None})


@app.route('/api/wedding', methods=['POST'])
@login_required
def api_save_wedding():
    """Save questionnaire answers as the user's wedding."""
    wedding = services().weddings.save_from_questionnaire(current_user_id(), json_body())
    return jsonify({'success': True, 'wedding': wedding.to_dict()})


@app.route('/api/chat', methods=['POST'])
@login_required
@rate_limited('CHAT')
def api_chat():
    """Next reply from the wedding planning assistant."""
    raw_messages = json_body().get('messages')
    if not isinstance(raw_messages, list) or not raw_messages:
        return jsonify({'error': 'Invalid messages format'}), 400

    try:
        messages = [
            ChatMessage.from_dict(m) for m in raw_messages[-MAX_CHAT_MESSAGES:]
            if isinstance(m, dict)
        ]
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        reply = services().llm.chat(messages, system_prompt=WEDDING_PLANNER_PROMPT)
    except LLMServiceError:
        logger.exception("Chat failed")
        return jsonify({'error': 'Chat is unavailable right now'}), 500

    return jsonify({'success': True, 'reply': reply})


@app.route('/api/outreach/generate-emails', methods=['POST'])
@login_required
@rate_limited('AI_GENERATION')
def api_generate_emails():
    """Draft inquiry emails for the selected vendors."""
    data = json_body()
    vendor_ids = [str(v) for v in validate_array(data.get('vendor_ids'), MAX_EMAILS_PER_BATCH)]
    wedding_id = sanitize_string(data.get('wedding_id'))

    if not vendor_ids:
        return jsonify({'error': 'vendor_ids array is required'}), 400
    if not wedding_id:
        return jsonify({'error': 'wedding_id is required'}), 400

    try:
        drafts = services().outreach.generate_emails(
            current_user_id(), session.get('user_email', ''), wedding_id, vendor_ids,
        )
    except OutreachAccessError as e:
        return jsonify({'error': str(e)}), 403
    except OutreachNotFoundError as e:
        return jsonify({'error': str(e)}), 404
    except VendorRepositoryError:
        logger.exception("Email generation failed")
        return jsonify({'error': 'Failed to generate emails'}), 500

    return jsonify({
        'success': True,
        'emails': [d.to_dict() for d in drafts],
        'wedding_id': wedding_id,
    })


@app.route('/api/outreach/send-batch', methods=['POST'])
@login_required
@rate_limited('EMAIL_SEND')
def api_send_batch():
    """Send reviewed drafts to vendors."""
    data = json_body()
    drafts = [
        OutreachDraft.from_dict(e) for e in validate_array(data.get('emails'), MAX_EMAILS_PER_BATCH)
        if isinstance(e, dict)
    ]
    wedding_id = sanitize_string(data.get('wedding_id'))

    if not drafts:
        return jsonify({'error': 'At least one email is required'}), 400
    if not wedding_id:
        return jsonify({'error': 'Valid wedding_id is required'}), 400

    try:
        result = services().outreach.send_batch(current_user_id(), wedding_id, drafts)
    except (OutreachAccessError, OutreachNotFoundError):
        return jsonify({'error': 'Wedding not found or access denied'}), 404
    except DeliveryServiceError as e:
        return jsonify({'error': str(e)}), 500
    except OutreachServiceError as e:
        return jsonify({'error': str(e)}), 400

    return jsonify({'success': True, **result.to_dict()})


@app.route('/api/outreach/add-response', methods=['POST'])
@login_required
def api_add_response():
    """Record a vendor's reply."""
    data = json_body()
    outreach_id = sanitize_string(data.get('outreach_id'))
    response_email = sanitize_string(data.get('response_email'))

    if not outreach_id:
        return jsonify({'error': 'outreach_id is required'}), 400
    if not response_email:
        return jsonify({'error': 'response_email is required'}), 400

    try:
        outreach = services().outreach.add_response(
            current_user_id(),
            outreach_id,
            response_email,
            quote=sanitize_number(data.get('quote'), min_value=0),
            notes=sanitize_string(data.get('notes')) or None,
        )
    except OutreachNotFoundError as e:
        return jsonify({'error': str(e)}), 404

    return jsonify({'success': True, 'outreach': outreach.to_dict()})


def _current_wedding_id():
    wedding_id = sanitize_string(request.args.get('wedding_id'))
    if wedding_id:
        return wedding_id
    wedding = services().weddings.get_current_wedding(current_user_id())
    return wedding.id if wedding else None


@app.route('/api/outreach', methods=['GET'])
@login_required
def api_list_outreach():
    """Outreach records and dashboard stats for a wedding."""
    wedding_id = _current_wedding_id()
    if not wedding_id:
        return jsonify({'error': 'No wedding found'}), 404

    try:
        outreach = services().outreach
        records = outreach.list_outreach(current_user_id(), wedding_id)
        stats = outreach.dashboard_stats(current_user_id(), wedding_id)
    except (OutreachAccessError, OutreachNotFoundError):
        return jsonify({'error': 'Wedding not found or access denied'}), 404

    return jsonify({
        'success': True,
        'outreach': [r.to_dict() for r in records],
        'stats': stats.to_dict(),
    })


@app.route('/api/outreach/responses', methods=['GET'])
@login_required
def api_list_responses():
    wedding_id = _current_wedding_id()
    if not wedding_id:
        return jsonify({'error': 'No wedding found'}), 404

    try:
        responses = services().outreach.list_responses(current_user_id(), wedding_id)
    except (OutreachAccessError, OutreachNotFoundError):
        return jsonify({'error': 'Wedding not found or access denied'}), 404

    return jsonify({'success': True, 'responses': [r.to_dict() for r in responses]})


if __name__ == '__main__':
    for problem in validate_env():
        logger.warning("Config: %s", problem)

    port = int(os.environ.get('PORT', 5000))
    app.run(debug=False, host='0.0.0.0', port=port)
