from flask import Blueprint, request, abort, g
from hrms import get_db
from hrms.models.expense import Expense
from hrms.constants.permissions import ROLE_EMPLOYEE, ROLE_CLIENT
from hrms.decorators.auth import authenticate, check_permission, current_principal
from hrms.decorators.company import enforce_company_access, scope_to_company
from hrms.decorators.validation import json_body, validate_expense, validate_object_id, validate_date_range
from hrms.utils.dates import parse_calendar_date
from hrms.utils.listing import paginated_response
from hrms.utils.serializers import expense_dict
from hrms.utils.sorting import apply_multi_sort
from hrms.utils.validation import amount_to_cents, id_param

expenses_bp = Blueprint('expenses', __name__)
expenses_bp.before_request(authenticate)

SORT_FIELDS = {
    'date': Expense.expense_date,
    'amount': Expense.amount_cents,
    'status': Expense.status,
    'category': Expense.category,
}
# Roles limited to their own claims
SELF_SCOPED_ROLES = (ROLE_EMPLOYEE, ROLE_CLIENT)


@expenses_bp.post('')
@check_permission('expenses', 'create')
@validate_expense
def create_expense():
    user = current_principal()
    data = json_body()
    expense = Expense(
        user_id=user.id, company_id=user.company_id, category=data['category'],
        amount_cents=amount_to_cents(data['amount']), expense_date=parse_calendar_date(data['date']),
        description=data['description'].strip(), status=Expense.STATUS_PENDING,
    )
    session = get_db()
    session.add(expense)
    session.commit()
    return {'success': True, 'message': 'Expense submitted successfully', 'data': expense_dict(expense)}, 201


@expenses_bp.get('')
@check_permission('expenses', 'view')
@scope_to_company
@validate_date_range
def list_expenses():
    user = current_principal()
    q = get_db().query(Expense)
    if g.company_scope:
        q = q.filter(Expense.company_id == g.company_scope)
    if user.role in SELF_SCOPED_ROLES:
        q = q.filter(Expense.user_id == user.id)
    elif g.query.get('userId'):
        q = q.filter(Expense.user_id == id_param(g.query['userId'], 'userId'))
    for param, col in (('status', Expense.status), ('category', Expense.category)):
        if g.query.get(param):
            q = q.filter(col == g.query[param])
    start, end = parse_calendar_date(g.query.get('startDate')), parse_calendar_date(g.query.get('endDate'))
    if start and end:
        q = q.filter(Expense.expense_date >= start, Expense.expense_date <= end)
    q = apply_multi_sort(q, request.args.get('sort'), SORT_FIELDS, Expense.id)
    return paginated_response(q, expense_dict)


@expenses_bp.get('/<expense_id>')
@check_permission('expenses', 'view')
@validate_object_id('expense_id')
@enforce_company_access(Expense, id_arg='expense_id')
def get_expense(expense_id):
    user = current_principal()
    expense = g.get('resource') or get_db().get(Expense, int(expense_id))
    if expense is None:
        abort(404, description='Expense not found')
    if user.role in SELF_SCOPED_ROLES and expense.user_id != user.id:
        abort(403, description='Access denied')
    return {'success': True, 'data': expense_dict(expense)}
