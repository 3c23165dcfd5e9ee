from flask import Blueprint, abort, g
from sqlalchemy import or_
from hrms import get_db
from hrms.models.policy import CompanyPolicy
from hrms.decorators.auth import authenticate, check_permission
from hrms.decorators.company import enforce_company_access, scope_to_company
from hrms.decorators.validation import validate_object_id
from hrms.utils.listing import paginated_response
from hrms.utils.serializers import policy_dict

policies_bp = Blueprint('policies', __name__)
policies_bp.before_request(authenticate)


@policies_bp.get('')
@check_permission('policies', 'view')
@scope_to_company
def list_policies():
    q = get_db().query(CompanyPolicy).filter(CompanyPolicy.is_active.is_(True))
    if g.company_scope:
        # Policies without a company are shared by every tenant
        q = q.filter(or_(CompanyPolicy.company_id == g.company_scope, CompanyPolicy.company_id.is_(None)))
    if g.query.get('category'):
        q = q.filter(CompanyPolicy.category == g.query['category'])
    q = q.order_by(CompanyPolicy.id.desc())
    return paginated_response(q, policy_dict)


@policies_bp.get('/<policy_id>')
@check_permission('policies', 'view')
@validate_object_id('policy_id')
@enforce_company_access(CompanyPolicy, id_arg='policy_id')
def get_policy(policy_id):
    policy = g.get('resource') or get_db().get(CompanyPolicy, int(policy_id))
    if policy is None:
        abort(404, description='Policy not found')
    return {'success': True, 'data': policy_dict(policy)}
