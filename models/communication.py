from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from database import Base

class CommunicationEvaluation(Base):
    __tablename__ = "communication_evaluation"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    input_text = Column(Text, nullable=False)
    fluency_score = Column(Integer, nullable=False)
    grammar_score = Column(Integer, nullable=False)
    pronunciation_score = Column(Integer, nullable=False)
    listening_score = Column(Integer, nullable=False)
    feedback = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def overall_score(self) -> int:
        total = self.fluency_score + self.grammar_score + self.pronunciation_score + self.listening_score
        return int(total / 4 + 0.5)
