from rest_framework import permissions


class IsEmployeeUser(permissions.BasePermission):
    """
    Permission: User must have the employee role.
    """
    message = 'Only employees can perform this action.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_employee)


class IsSupplierUser(permissions.BasePermission):
    """
    Permission: User must have the supplier role.
    """
    message = 'Only suppliers can perform this action.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_supplier)
