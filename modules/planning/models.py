from sqlalchemy import Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from core.models import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)
    profit = Column(Float, nullable=False)

    consumption = relationship("Consumption", back_populates="product", passive_deletes=True)


class Resource(Base):
    __tablename__ = "resources"

    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)
    stock = Column(Float, nullable=False)

    consumption = relationship("Consumption", back_populates="resource", passive_deletes=True)


class Consumption(Base):
    __tablename__ = "consumption"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    product_id = Column(String(255), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    resource_id = Column(String(255), ForeignKey("resources.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Float, nullable=False)

    product = relationship("Product", back_populates="consumption")
    resource = relationship("Resource", back_populates="consumption")
