"""GraphQL documents run against Hasura."""

REVIEW_FIELDS = """
  id
  title
  content
  author_id
  likes_count
  parent_review_id
  created_at
  author { id display_name image }
"""

FOLLOW_USER_FIELDS = """
  id
  display_name
  image
  palates
"""

REVIEW_EXISTS = """
query ReviewExists($reviewId: Int!) {
  restaurant_reviews_by_pk(id: $reviewId) { id restaurant_id }
}
"""

INSERT_LIKE = """
mutation InsertLike($reviewId: Int!, $userId: Int!) {
  insert_restaurant_review_likes_one(
    object: {review_id: $reviewId, user_id: $userId}
    on_conflict: {constraint: restaurant_review_likes_pkey, update_columns: []}
  ) { review_id }
}
"""

DELETE_LIKE = """
mutation DeleteLike($reviewId: Int!, $userId: Int!) {
  delete_restaurant_review_likes(
    where: {review_id: {_eq: $reviewId}, user_id: {_eq: $userId}}
  ) { affected_rows }
}
"""

LIKE_STATE = """
query LikeState($reviewId: Int!, $userId: Int!) {
  total: restaurant_review_likes_aggregate(where: {review_id: {_eq: $reviewId}}) {
    aggregate { count }
  }
  mine: restaurant_review_likes(
    where: {review_id: {_eq: $reviewId}, user_id: {_eq: $userId}}
  ) { user_id }
}
"""

UPDATE_LIKES_COUNT = """
mutation UpdateLikesCount($reviewId: Int!, $count: Int!) {
  update_restaurant_reviews_by_pk(
    pk_columns: {id: $reviewId}, _set: {likes_count: $count}
  ) { id }
}
"""

LIKED_REVIEW_IDS = """
query LikedReviewIds($userId: Int!, $reviewIds: [Int!]!) {
  restaurant_review_likes(
    where: {user_id: {_eq: $userId}, review_id: {_in: $reviewIds}}
  ) { review_id }
}
"""

REPLIES = f"""
query Replies($parentId: Int!) {{
  restaurant_reviews(
    where: {{parent_review_id: {{_eq: $parentId}}, status: {{_eq: "approved"}}}}
    order_by: {{created_at: desc}}
  ) {{ {REVIEW_FIELDS} }}
}}
"""

TOP_LEVEL_REVIEWS = f"""
query TopLevelReviews($limit: Int!, $offset: Int!) {{
  restaurant_reviews(
    where: {{parent_review_id: {{_is_null: true}}, status: {{_eq: "approved"}}}}
    order_by: {{created_at: desc}}
    limit: $limit
    offset: $offset
  ) {{ {REVIEW_FIELDS} }}
}}
"""

USER_REVIEWS = f"""
query UserReviews($authorId: Int!, $limit: Int!, $offset: Int!) {{
  restaurant_reviews(
    where: {{
      author_id: {{_eq: $authorId}}
      parent_review_id: {{_is_null: true}}
      status: {{_eq: "approved"}}
    }}
    order_by: {{created_at: desc}}
    limit: $limit
    offset: $offset
  ) {{ {REVIEW_FIELDS} }}
}}
"""

COMMENT_CONTEXT = """
query CommentContext($parentId: Int!, $authorId: Int!) {
  parent: restaurant_reviews_by_pk(id: $parentId) { id restaurant_id }
  own_replies: restaurant_reviews(
    where: {parent_review_id: {_eq: $parentId}, author_id: {_eq: $authorId}}
  ) { id content }
  latest: restaurant_reviews(
    where: {author_id: {_eq: $authorId}, parent_review_id: {_is_null: false}}
    order_by: {created_at: desc}
    limit: 1
  ) { created_at }
}
"""

INSERT_REPLY = f"""
mutation InsertReply($parentId: Int!, $restaurantId: Int, $authorId: Int!, $content: String!) {{
  insert_restaurant_reviews_one(
    object: {{
      parent_review_id: $parentId
      restaurant_id: $restaurantId
      author_id: $authorId
      content: $content
      status: "approved"
    }}
  ) {{ {REVIEW_FIELDS} status }}
}}
"""

INSERT_FOLLOW = """
mutation InsertFollow($followerId: Int!, $userId: Int!) {
  insert_restaurant_user_follows_one(
    object: {follower_id: $followerId, user_id: $userId}
    on_conflict: {constraint: restaurant_user_follows_pkey, update_columns: []}
  ) { user_id }
}
"""

DELETE_FOLLOW = """
mutation DeleteFollow($followerId: Int!, $userId: Int!) {
  delete_restaurant_user_follows(
    where: {follower_id: {_eq: $followerId}, user_id: {_eq: $userId}}
  ) { affected_rows }
}
"""

FOLLOW_STATUS = """
query FollowStatus($followerId: Int!, $userId: Int!) {
  restaurant_user_follows(
    where: {follower_id: {_eq: $followerId}, user_id: {_eq: $userId}}
  ) { user_id }
}
"""

FOLLOWED_IDS = """
query FollowedIds($followerId: Int!, $userIds: [Int!]!) {
  restaurant_user_follows(
    where: {follower_id: {_eq: $followerId}, user_id: {_in: $userIds}}
  ) { user_id }
}
"""

FOLLOWERS = f"""
query Followers($userId: Int!, $limit: Int!, $offset: Int!) {{
  restaurant_user_follows(
    where: {{user_id: {{_eq: $userId}}}}
    order_by: {{created_at: desc}}
    limit: $limit
    offset: $offset
  ) {{ person: follower {{ {FOLLOW_USER_FIELDS} }} }}
}}
"""

FOLLOWING = f"""
query Following($userId: Int!, $limit: Int!, $offset: Int!) {{
  restaurant_user_follows(
    where: {{follower_id: {{_eq: $userId}}}}
    order_by: {{created_at: desc}}
    limit: $limit
    offset: $offset
  ) {{ person: user {{ {FOLLOW_USER_FIELDS} }} }}
}}
"""

USER_EXISTS = """
query UserExists($userId: Int!) {
  restaurant_users_by_pk(id: $userId) { id }
}
"""

FOLLOW_COUNTS = """
query FollowCounts($userId: Int!) {
  followers: restaurant_user_follows_aggregate(where: {user_id: {_eq: $userId}}) {
    aggregate { count }
  }
  following: restaurant_user_follows_aggregate(where: {follower_id: {_eq: $userId}}) {
    aggregate { count }
  }
}
"""

RESTAURANT_BY_SLUG = """
query RestaurantBySlug($slug: String!) {
  restaurants(where: {slug: {_eq: $slug}, status: {_eq: "publish"}}, limit: 1) { id slug }
}
"""

FAVORITE_STATUS = """
query FavoriteStatus($userId: Int!, $restaurantId: Int!) {
  user_favorites(
    where: {user_id: {_eq: $userId}, restaurant_id: {_eq: $restaurantId}}
    limit: 1
  ) { id }
}
"""

INSERT_FAVORITE = """
mutation InsertFavorite($userId: Int!, $restaurantId: Int!) {
  insert_user_favorites_one(
    object: {user_id: $userId, restaurant_id: $restaurantId}
    on_conflict: {constraint: user_favorites_user_id_restaurant_id_key, update_columns: []}
  ) { id }
}
"""

DELETE_FAVORITE = """
mutation DeleteFavorite($userId: Int!, $restaurantId: Int!) {
  delete_user_favorites(
    where: {user_id: {_eq: $userId}, restaurant_id: {_eq: $restaurantId}}
  ) { affected_rows }
}
"""
