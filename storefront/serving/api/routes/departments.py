"""
Departments API Endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database.connection import get_db_dependency
from storefront.services import catalog

router = APIRouter()


class DepartmentResponse(BaseModel):
    department_id: int
    name: str
    description: Optional[str]

    class Config:
        from_attributes = True


@router.get("", response_model=List[DepartmentResponse])
async def list_departments(
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> List[DepartmentResponse]:
    departments = await catalog.list_departments(db)
    return [DepartmentResponse.model_validate(d) for d in departments]


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(
    department_id: int,
    db: AsyncSession = Depends(get_db_dependency, scope="function"),
) -> DepartmentResponse:
    department = await catalog.get_department(db, department_id)
    return DepartmentResponse.model_validate(department)
