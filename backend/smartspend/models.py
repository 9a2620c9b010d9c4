import datetime
from sqlalchemy import Column, Integer, String, Float, Date, ForeignKey, Boolean, DateTime, Text
from sqlalchemy.orm import relationship
from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String)
    full_name = Column(String)
    password_hash = Column(String, nullable=False)  # bcrypt hash, never plain text
    balance = Column(Float, default=0.0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    transactions = relationship("Transaction", back_populates="user", cascade="all, delete-orphan")
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")


class UserSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    # One active session per user
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    session_token = Column(String, unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    user = relationship("User", back_populates="sessions")


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False)  # 'income' or 'expense'
    category = Column(String, nullable=False, index=True)
    description = Column(String, nullable=True)
    amount = Column(Float, nullable=False)
    transaction_date = Column(DateTime, default=datetime.datetime.utcnow, index=True)

    user = relationship("User", back_populates="transactions")


class SpendingPrediction(Base):
    __tablename__ = "spending_predictions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category = Column(String, nullable=False)
    predicted_amount = Column(Float, nullable=False)
    prediction_date = Column(Date, nullable=False)  # first day of the forecast month
    created_at = Column(DateTime, default=datetime.datetime.utcnow)


class Recommendation(Base):
    __tablename__ = "recommendations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category = Column(String, nullable=False)
    recommendation_type = Column(String, nullable=False)  # pattern, budget, local
    message = Column(Text, nullable=False)
    potential_savings = Column(Float, default=0.0)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
