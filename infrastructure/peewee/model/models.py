from peewee import AutoField, CharField, DateField, DateTimeField, Model, TextField

from infrastructure.peewee.session.db import db


class TaskModel(Model):
    id = AutoField()
    title = CharField(max_length=100)
    description = TextField(null=True)
    status = CharField(max_length=20, default="pending", index=True)
    priority = CharField(max_length=10, default="medium", index=True)
    due_date = DateField(null=True)
    created_at = DateTimeField()
    updated_at = DateTimeField()

    class Meta:
        database = db
        table_name = "tasks"
