from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from database import Base
import enum

class BusinessCategory(enum.Enum):
    TECHNOLOGY = "technology"
    FOOD = "food"
    RETAIL = "retail"
    SERVICES = "services"
    EDUCATION = "education"
    HEALTH = "health"

class BudgetTier(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class BusinessInput(Base):
    __tablename__ = "business_inputs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    business_interest = Column(Enum(BusinessCategory), nullable=False)
    budget = Column(Enum(BudgetTier), nullable=False)
    location = Column(String(200), nullable=False)
    goals = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
