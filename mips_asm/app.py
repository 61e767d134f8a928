# mips_asm/app.py
import os
import io
import logging

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS

from mips_asm.mips_assembler import MipsAssembler
from mips_asm.mips_encoder import words_to_bytes
from mips_asm.mips_errors import AssemblerError

logger = logging.getLogger(__name__)

CORS_ORIGINS = [o.strip() for o in os.environ.get("MIPS_ASM_CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

app = Flask(__name__)
CORS(app, resources={r"/api/*": {"origins": CORS_ORIGINS}})


def _get_assembly():
    """Returns the 'assembly' string of the JSON body, or None if missing."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('assembly'), str):
        return None
    return data['assembly']


def _missing_assembly():
    return jsonify({"errors": [{"message": "Missing 'assembly' key in request."}]}), 400


@app.route('/')
def index():
    return "MIPS Assembler Backend is running!"


@app.route('/api/ping', methods=['GET'])
def ping():
    logger.debug("Ping endpoint called")
    return jsonify({"message": "pong"})


@app.route('/api/assemble', methods=['POST'])
def handle_assemble():
    assembly_code = _get_assembly()
    if assembly_code is None:
        return _missing_assembly()
    logger.debug(f"Received assembly: {assembly_code[:100]}...")
    # A fresh assembler per request keeps runs independent
    result = MipsAssembler().assemble(assembly_code)
    if result['errors']:
        logger.warning(f"Assembly failed: {result['errors']}")
        return jsonify(result), 400
    logger.debug(f"Assembly successful. Code length: {len(result['machine_code'])}")
    return jsonify(result)


@app.route('/api/tokenize', methods=['POST'])
def handle_tokenize():
    assembly_code = _get_assembly()
    if assembly_code is None:
        return _missing_assembly()
    try:
        lines = MipsAssembler().tokenize(assembly_code)
    except AssemblerError as e:
        return jsonify({"lines": [], "errors": [e.to_dict()]}), 400
    return jsonify({"lines": lines, "errors": []})


@app.route('/api/export/binary', methods=['POST'])
def handle_export_binary():
    assembly_code = _get_assembly()
    if assembly_code is None:
        return _missing_assembly()
    try:
        words = MipsAssembler().run(assembly_code)
    except AssemblerError as e:
        return jsonify({"errors": [e.to_dict()]}), 400
    return send_file(io.BytesIO(words_to_bytes(words)), mimetype="application/octet-stream",
                     as_attachment=True, download_name="program.bin")


if __name__ == '__main__':
    app.run(debug=False, port=int(os.environ.get("MIPS_ASM_PORT", "5001")))
