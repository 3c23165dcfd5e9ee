from flask import Blueprint, request, abort, g
from hrms import get_db
from hrms.models.task import Task
from hrms.constants.domain import ERROR_MESSAGES
from hrms.constants.permissions import ROLE_ADMIN, ROLE_HR, ROLE_EMPLOYEE
from hrms.decorators.auth import authenticate, authorize, check_permission, current_principal, user_store
from hrms.decorators.company import enforce_company_access, scope_to_company, same_company
from hrms.decorators.validation import json_body, validate_task, validate_task_update, validate_object_id
from hrms.utils.dates import parse_calendar_date
from hrms.utils.listing import paginated_response
from hrms.utils.serializers import task_dict
from hrms.utils.sorting import apply_multi_sort
from hrms.utils.validation import id_param, validate_status

tasks_bp = Blueprint('tasks', __name__)
tasks_bp.before_request(authenticate)

SORT_FIELDS = {
    'dueDate': Task.due_date,
    'priority': Task.priority,
    'status': Task.status,
    'progress': Task.progress,
}


@tasks_bp.post('')
@authorize(ROLE_ADMIN, ROLE_HR)
@check_permission('tasks', 'create')
@validate_task
def create_task():
    user = current_principal()
    data = json_body()
    assignee = user_store().get_user(data['assignedTo'])
    if assignee is None:
        abort(404, description=ERROR_MESSAGES['USER_NOT_FOUND'])
    if user.role != ROLE_ADMIN and not same_company(assignee.company_id, user.company_id):
        abort(403, description=ERROR_MESSAGES['COMPANY_ACCESS_DENIED'])
    task = Task(
        title=data['title'].strip(), description=data.get('description'), assigned_to=assignee.id,
        assigned_by=user.id, company_id=assignee.company_id if assignee.company_id is not None else user.company_id,
        priority=data.get('priority') or 'medium', status=Task.STATUS_TODO,
        progress=int(float(data.get('progress') or 0)), due_date=parse_calendar_date(data.get('dueDate')),
    )
    session = get_db()
    session.add(task)
    session.commit()
    return {'success': True, 'message': 'Task created successfully', 'data': task_dict(task)}, 201


@tasks_bp.get('')
@check_permission('tasks', 'view')
@scope_to_company
def list_tasks():
    user = current_principal()
    q = get_db().query(Task)
    if g.company_scope:
        q = q.filter(Task.company_id == g.company_scope)
    if user.role == ROLE_EMPLOYEE:
        q = q.filter(Task.assigned_to == user.id)
    elif g.query.get('assignedTo'):
        q = q.filter(Task.assigned_to == id_param(g.query['assignedTo'], 'assignedTo'))
    if g.query.get('status'):
        q = q.filter(Task.status == validate_status(g.query['status'], Task.ALL_STATUSES))
    if g.query.get('priority'):
        q = q.filter(Task.priority == g.query['priority'])
    q = apply_multi_sort(q, request.args.get('sort'), SORT_FIELDS, Task.id)
    return paginated_response(q, task_dict)


@tasks_bp.get('/<task_id>')
@validate_object_id('task_id')
@enforce_company_access(Task, id_arg='task_id')
def get_task(task_id):
    task = g.get('resource') or get_db().get(Task, int(task_id))
    if task is None:
        abort(404, description='Task not found')
    return {'success': True, 'data': task_dict(task)}


@tasks_bp.put('/<task_id>/progress')
@validate_object_id('task_id')
@enforce_company_access(Task, id_arg='task_id')
@validate_task_update
def update_progress(task_id):
    user = current_principal()
    data = json_body()
    if data.get('progress') is None:
        abort(400, description='Progress value is required')
    session = get_db()
    task = g.get('resource') or session.get(Task, int(task_id))
    if task is None:
        abort(404, description='Task not found')
    if user.role == ROLE_EMPLOYEE and task.assigned_to != user.id:
        abort(403, description='You can only update progress on tasks assigned to you')
    task.progress = int(float(data['progress']))
    if task.progress == 100:
        task.status = Task.STATUS_COMPLETED
    elif task.status == Task.STATUS_COMPLETED or (task.progress > 0 and task.status == Task.STATUS_TODO):
        task.status = Task.STATUS_IN_PROGRESS
    session.commit()
    return {'success': True, 'message': 'Task progress updated successfully', 'data': task_dict(task)}
