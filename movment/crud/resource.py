# movment/crud/resource.py
from movment.crud.base import CRUDBase
from movment.models.resource import Resource
from movment.schemas.resource import ResourceIn, ResourceUpdate

resource_crud = CRUDBase[Resource, ResourceIn, ResourceUpdate](Resource)
