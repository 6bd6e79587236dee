"""Wallet blueprint: balances, deposits and withdrawals."""

from flask import Blueprint, jsonify, request

from fantasy_cricket.api.helpers import parse_body, require_user_id, wallet_repo
from fantasy_cricket.schemas.requests import DepositRequest, WithdrawRequest

wallet_bp = Blueprint("wallet", __name__)


@wallet_bp.route("/api/wallet")
def api_wallet():
    user_id, err = require_user_id(request.args)
    if err:
        return jsonify(err[0]), err[1]
    return jsonify(wallet_repo().get_wallet_details(user_id))


@wallet_bp.route("/api/wallet/deposit", methods=["POST"])
def api_wallet_deposit():
    req, err = parse_body(DepositRequest, request.get_json(silent=True))
    if err:
        return jsonify(err[0]), err[1]
    balance = wallet_repo().add_money(req.user_id, req.amount)
    return jsonify({"user_id": req.user_id, "balance": balance})


@wallet_bp.route("/api/wallet/withdraw", methods=["POST"])
def api_wallet_withdraw():
    req, err = parse_body(WithdrawRequest, request.get_json(silent=True))
    if err:
        return jsonify(err[0]), err[1]
    # InsufficientFunds -> 402 via middleware
    balance = wallet_repo().withdraw_money(req.user_id, req.amount)
    return jsonify({"user_id": req.user_id, "balance": balance})
