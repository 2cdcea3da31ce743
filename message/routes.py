from fastapi import APIRouter, Depends, HTTPException
from beanie.operators import And, Or
from typing import List

from models.message import Message
from models.user import User
from auth.auth_handler import get_current_user
from schemas.message import MessageCreate, MessageResponse
from utils.object_ids import to_object_id

router = APIRouter(prefix="/messages")


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(body: MessageCreate, current_user: User = Depends(get_current_user)):
    receiver = await User.get(to_object_id(body.receiver_id, "receiver ID"))
    if not receiver:
        raise HTTPException(status_code=404, detail="Receiver not found")
    if receiver.id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot send a message to yourself")

    message = Message(sender_id=current_user.id, receiver_id=receiver.id, content=body.content)
    await message.insert()
    return MessageResponse.model_validate(message)


@router.get("/{user_id}", response_model=List[MessageResponse])
async def get_messages(user_id: str, current_user: User = Depends(get_current_user)):
    other_id = to_object_id(user_id, "user ID")
    messages = (
        await Message.find(
            Or(
                And(Message.sender_id == current_user.id, Message.receiver_id == other_id),
                And(Message.sender_id == other_id, Message.receiver_id == current_user.id),
            )
        )
        .sort(-Message.timestamp)
        .to_list()
    )
    return [MessageResponse.model_validate(m) for m in messages]


@router.put("/{message_id}/read", response_model=MessageResponse)
async def mark_message_read(message_id: str, current_user: User = Depends(get_current_user)):
    message = await Message.get(to_object_id(message_id, "message ID"))
    if message is None:
        raise HTTPException(status_code=404, detail="Message not found")
    if message.receiver_id != current_user.id:
        raise HTTPException(status_code=403, detail="Only the receiver can mark a message as read")
    message.is_read = True
    await message.save()
    return MessageResponse.model_validate(message)
