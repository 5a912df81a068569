"""Question database model."""

from sqlalchemy import Column, Integer, String, Text
from .base import Base


class QuestionModel(Base):
    """A single quiz question for one year level."""

    __tablename__ = "questions"

    # Autoincrement id doubles as insertion order
    id = Column(Integer, primary_key=True, index=True)
    year_level = Column(Integer, index=True, nullable=False)
    question = Column(Text, nullable=False)
    options = Column(Text, nullable=False)  # JSON list of option strings
    correct_answer = Column(String, nullable=False)
    difficulty = Column(String, nullable=False, default="medium")  # easy / medium / hard
    question_type = Column(String, nullable=False, default="mcq")  # mcq / numerical / string
