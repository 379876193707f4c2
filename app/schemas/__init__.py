from .user import UserCreate, AdminUserCreate, UserLogin, UserUpdate, UserOut, UserBasic
from .tokens import Token
from .task import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskOut, Pagination, TaskPage
